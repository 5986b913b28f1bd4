"""
Simulation failure conditions.

Each failure is raised before integration starts; a run either completes
or produces no result at all.
"""


class SimulationError(Exception):
    """Base class for run failures that should be shown to the user."""
    
    default_message = "Simulation failed."
    
    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class NoConnectedChain(SimulationError):
    """The diagram has no step block to start a chain from."""
    default_message = "No connected chain found from a Step block."


class NoStepInChain(SimulationError):
    """The resolved chain does not contain a step block."""
    default_message = "No Step block found in the connected chain."


class NoPlantInForwardPath(SimulationError):
    """No plant block follows the step in the chain."""
    default_message = "Simulation needs at least one Plant block after the Step in the chain."
