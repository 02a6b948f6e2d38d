from __future__ import annotations

import os

import pandas as pd
import plotly.express as px
import streamlit as st

from towerops.config import Config
from towerops.core.airport import Airport
from towerops.core.errors import AirportError
from towerops.orchestrator.sim import TrafficSimulation
from towerops.persistence import store
from towerops.reporting.boards import arrivals_board, departures_board, export_zip, runway_board


cfg = Config()

st.set_page_config(page_title="Airport Tower", layout="wide")
st.title("Airport Tower")


def run_action(action, success: str) -> None:
	try:
		result = action()
	except AirportError as e:
		st.error(f"[{e.code}] {e}")
		return
	st.success(success.format(result=result))


with st.sidebar:
	st.header("Airport")
	num_runways = st.number_input("Runways", min_value=1, max_value=12, value=cfg.num_runways, step=1)
	state_file = st.text_input("State file", value=cfg.state_file)
	if st.button("New airport"):
		st.session_state["airport"] = Airport(int(num_runways))
	if st.button("Save"):
		if "airport" in st.session_state:
			try:
				store.save(st.session_state["airport"], state_file)
				st.info("State saved")
			except OSError as e:
				st.error(f"Could not save {state_file}: {e}")
	if st.button("Load saved state"):
		if not os.path.exists(state_file):
			st.error(f"No saved airport at {state_file}")
		else:
			try:
				st.session_state["airport"] = store.load(state_file)
				st.info("State loaded")
			except AirportError as e:
				st.error(f"Could not open {state_file}: {e}")

airport: Airport | None = st.session_state.get("airport")
if airport is None:
	st.info("Open a new airport or load a saved one from the sidebar.")
	st.stop()

tab_ops, tab_arr, tab_dep, tab_sim = st.tabs(["Flight control", "Arrivals", "Departures", "Simulation"])

with tab_ops:
	c1, c2, c3 = st.columns(3)
	with c1:
		with st.form("register"):
			st.subheader("Register")
			flight = st.text_input("Flight number")
			city = st.text_input("Origin")
			if st.form_submit_button("Register"):
				if not flight or not city:
					st.error("Flight number and origin are required")
				else:
					run_action(lambda: airport.register_flight(flight, city), f"Flight {flight} from {city} confirmed")
		with st.form("arrive"):
			st.subheader("Request to land")
			flight = st.text_input("Flight number", key="arrive_flight")
			if st.form_submit_button("Request"):
				def request():
					runway = airport.request_arrival(flight)
					return f"runway {runway}" if runway else "no free runway, circle and wait"
				run_action(request, f"{flight}: {{result}}")
	with c2:
		with st.form("land"):
			st.subheader("Confirm landing")
			flight = st.text_input("Flight number", key="land_flight")
			runway = st.number_input("Runway", min_value=1, max_value=airport.runway_count(), step=1)
			if st.form_submit_button("Landed"):
				run_action(lambda: airport.confirm_landing(flight, int(runway)), f"Flight {flight} landed on runway {int(runway)}")
		with st.form("board"):
			st.subheader("Announce boarding")
			flight = st.text_input("Flight number", key="board_flight")
			city = st.text_input("Destination")
			if st.form_submit_button("Announce"):
				if not city:
					st.error("Destination is required")
				else:
					run_action(lambda: airport.ready_for_departure(flight, city), f"Boarding announced for {flight} to {city}")
	with c3:
		with st.form("takeoff"):
			st.subheader("Take-off")
			flight = st.text_input("Flight number", key="takeoff_flight")
			if st.form_submit_button("Took off"):
				def takeoff():
					promoted = airport.process_takeoff(flight)
					if promoted is None:
						return "none circling"
					return f"{promoted.flight_id} cleared for runway {promoted.runway_id}"
				run_action(takeoff, f"Flight {flight} left the airport; next to land: {{result}}")

		st.subheader("Runways")
		rw_df = runway_board(airport)
		st.dataframe(rw_df, hide_index=True)
		fig = px.bar(
			rw_df.assign(in_use=rw_df["occupied"].astype(int)),
			x="runway",
			y="in_use",
			text="flight",
			title="Runway occupancy",
		)
		fig.update_yaxes(range=[0, 1], tickvals=[0, 1], ticktext=["free", "booked"])
		st.plotly_chart(fig, use_container_width=True)
		st.caption(f"Circling: {', '.join(airport.waiting_queue()) or 'none'}")

with tab_arr:
	st.dataframe(arrivals_board(airport.list_arrivals()), hide_index=True)

with tab_dep:
	st.dataframe(departures_board(airport.list_departures()), hide_index=True)

st.divider()
logs = airport.bus.records()
if logs:
	st.subheader("Tower log")
	st.dataframe(pd.DataFrame(logs).tail(100), hide_index=True)
st.download_button("Download boards (ZIP)", data=export_zip(airport), file_name="airport_boards.zip", mime="application/zip")

with tab_sim:
	steps = st.slider("Steps", 50, 1000, cfg.sim_steps, step=50)
	flights = st.slider("Flights", 2, 60, cfg.sim_flights)
	seed = st.number_input("Seed", min_value=0, value=cfg.seed, step=1)
	if st.button("Run Simulation"):
		sim_cfg = Config(num_runways=airport.runway_count(), sim_steps=steps, sim_flights=flights, seed=int(seed))
		metrics = TrafficSimulation(sim_cfg).run()
		c1, c2 = st.columns(2)
		with c1:
			st.subheader("Accepted")
			st.bar_chart(pd.Series(metrics.decisions))
		with c2:
			st.subheader("Rejected")
			if metrics.rejections:
				st.bar_chart(pd.Series(metrics.rejections))
		st.metric("Events", metrics.num_events)
		st.metric("Longest circling queue", metrics.max_queue_length)
		st.subheader("Arrivals after simulation")
		st.dataframe(metrics.arrivals, hide_index=True)
		st.subheader("Departures after simulation")
		st.dataframe(metrics.departures, hide_index=True)
