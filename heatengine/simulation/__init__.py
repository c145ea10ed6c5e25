"""End-to-end household assessment."""

from .runner import HouseholdInputs, SimulationResults, SimulationRunner, run_simulation

__all__ = ["HouseholdInputs", "SimulationResults", "SimulationRunner", "run_simulation"]
