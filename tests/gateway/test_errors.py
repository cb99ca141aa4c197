"""异常 -> HTTP 状态码映射测试"""

import pytest
from taskrelay.core.exceptions import (
    ConflictError,
    DependencyTimeoutError,
    DependencyUnavailableError,
    InvalidTransitionError,
    MalformedPatchError,
    TaskNotFoundError,
    UnhandledEventError,
    UnknownEventError,
    VersionConflictError,
)
from taskrelay.gateway.errors import status_code_for


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (MalformedPatchError("bad"), 400),
        (TaskNotFoundError("t1", "ops"), 404),
        (InvalidTransitionError("t1", "UNASSIGNED", "STARTED"), 409),
        (ConflictError("taken"), 409),
        (VersionConflictError("t1", 1), 409),
        (UnknownEventError("unknown"), 422),
        (DependencyUnavailableError("document_store"), 503),
        (DependencyTimeoutError("roster"), 504),
        (UnhandledEventError("no listener"), 500),
    ],
)
def test_status_code_for(error, status_code):
    assert status_code_for(error) == status_code
