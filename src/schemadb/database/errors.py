from typing import Any, Dict, List, Optional, Union

SubError = Union[str, Dict[str, Any]]


class CollectionError(Exception):
  """
  Domain failure with a suggested http status code.

  Every domain failure has the same shape: a status code, a short status
  message and a list of sub-errors, each a dict with at least a `message`.
  """

  status_code = 500

  def __init__(
      self,
      status_message: str,
      sub_errors: Optional[Union[SubError, List[SubError]]] = None,
      status_code: Optional[int] = None):
    super().__init__(status_message)
    if status_code is not None:
      self.status_code = status_code
    self.status_message = status_message

    if sub_errors is None:
      sub_errors = []
    elif not isinstance(sub_errors, list):
      sub_errors = [sub_errors]
    self.sub_errors = [
      e if isinstance(e, dict) else {"message": str(e)}
      for e in sub_errors
    ]

  def to_dict(self) -> Dict[str, Any]:
    return {
      "statusCode": self.status_code,
      "statusMessage": self.status_message,
      "subErrors": self.sub_errors
    }

  def __repr__(self):
    return f"{type(self).__name__}({self.status_code}, {self.status_message!r}, {self.sub_errors!r})"


class BadRequest(CollectionError):
  status_code = 400


class InvalidIdentifier(BadRequest):
  """A string identifier that cannot be parsed into a native id"""


class ValidationError(CollectionError):
  status_code = 400


class NotFound(CollectionError):
  status_code = 404


class UsageError(ValueError):
  """Caller misuse detected before any I/O"""


class InsertError(RuntimeError):
  """The store did not acknowledge an insert"""
