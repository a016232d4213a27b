"""Domain errors.

ConfigurationError is fatal at startup. LLMError covers transport/backend
failures of a model call; AgentExecutionError adds the id of the node that
failed. WorkflowError marks an invalid phase/progress combination.
"""


class CareerAgentError(Exception):
    """Base class for all domain errors."""


class ConfigurationError(CareerAgentError):
    """Missing credential or out-of-range model parameters."""


class LLMError(CareerAgentError):
    """Network or remote-service failure during a model call."""


class AgentExecutionError(LLMError):
    """Model call failed inside a specific agent node."""

    def __init__(self, node_id: str, message: str) -> None:
        self.node_id = node_id
        super().__init__(f"Agent {node_id} 执行失败: {message}")


class WorkflowError(CareerAgentError):
    """Invalid workflow phase or progress."""
