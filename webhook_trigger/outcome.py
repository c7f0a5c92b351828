"""Outcomes of sending webhook triggers"""

from attrs import define, field


@define(frozen=True)
class Success:
    """A message was accepted by the queue."""

    message_id: str = field()

    success = True

    def as_dict(self) -> dict:
        """returns the outcome as serializable dict"""
        return {"success": True, "messageId": self.message_id}


@define(frozen=True)
class Failure:
    """A message could not be validated or sent."""

    original_message: dict = field()
    error_message: str = field()

    success = False

    def as_dict(self) -> dict:
        """returns the outcome as serializable dict"""
        return {
            "success": False,
            "message": self.original_message,
            "errorMessage": self.error_message,
        }


Outcome = Success | Failure


@define(kw_only=True)
class BatchResult:
    """Accounting of a batch send. Holds exactly one outcome per input event, but not
    necessarily in input order."""

    success_count: int = field(default=0)
    error_count: int = field(default=0)
    outputs: list[Outcome] = field(factory=list)

    def add_success(self, message_id: str) -> None:
        """Records a successfully sent message."""
        self.success_count += 1
        self.outputs.append(Success(message_id))

    def add_failure(self, original_message: dict, error_message: str) -> None:
        """Records a message that failed validation or sending."""
        self.error_count += 1
        self.outputs.append(Failure(original_message, error_message))

    def as_dict(self) -> dict:
        """returns the result as serializable dict"""
        return {
            "successCount": self.success_count,
            "errorCount": self.error_count,
            "outputs": [outcome.as_dict() for outcome in self.outputs],
        }
