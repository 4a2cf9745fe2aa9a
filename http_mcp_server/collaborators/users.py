"""
In-memory user directory backing the user tools and resources.

Stands in for a real user store; state lives only as long as the process.
"""

import json
import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ToolError
from ..models import ResourceReadResult, ToolCallResult, text_content

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


class User(BaseModel):
    """A user known to the directory."""
    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=3, description="Email address")
    role: Literal["admin", "user", "guest"] = Field("user", description="Access role")
    created_at: datetime = Field(default_factory=datetime.now, description="When the user was created")


class SearchUsersArguments(BaseModel):
    """Arguments of the search_users tool.

    Loose input is accepted: any number is a limit (truncated, at least 1)
    and a non-string query is searched by its text.
    """
    query: Optional[str] = Field(None, description="Search keyword")
    limit: int = Field(DEFAULT_LIMIT, description="Maximum number of users to return")

    @field_validator("query", mode="before")
    @classmethod
    def _query_as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("limit", mode="before")
    @classmethod
    def _limit_from_number(cls, value: Any) -> int:
        try:
            limit = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_LIMIT
        return max(1, limit)


class UserDirectory:
    """Thread-safe in-memory list of users, newest last."""

    def __init__(self, users: Optional[List[User]] = None) -> None:
        self._lock = threading.Lock()
        self._users: List[User] = list(users or [])

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def recent(self, limit: int = DEFAULT_LIMIT) -> List[User]:
        """Most recently created users, newest first."""
        with self._lock:
            return list(reversed(self._users))[:limit]

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[User]:
        """Users whose name contains ``query`` (case-insensitive)."""
        needle = query.lower()
        with self._lock:
            matches = [user for user in self._users if needle in user.name.lower()]
        return matches[:limit]

    def create(self, name: str, email: str, role: str = "user") -> User:
        user = User(name=name, email=email, role=role)
        with self._lock:
            self._users.append(user)
        logger.info(f"Created user {user.name} <{user.email}> with role {user.role}")
        return user


def default_directory() -> UserDirectory:
    """Directory seeded with the demo users."""
    return UserDirectory([
        User(name="Alice Zhang", email="alice@example.com", role="admin"),
        User(name="Bob Li", email="bob@example.com"),
        User(name="Carol Wang", email="carol@example.com"),
    ])


def _names(users: List[User]) -> str:
    return ", ".join(user.name for user in users)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


# ============================================================================
# Tool and Resource Implementations
# ============================================================================

class UserService:
    """Tools and resources built on a UserDirectory."""

    def __init__(self, directory: UserDirectory) -> None:
        self.directory = directory

    def search_users(self, arguments: Dict[str, Any]) -> ToolCallResult:
        try:
            args = SearchUsersArguments.model_validate(arguments)
        except ValidationError as e:
            raise ToolError(f"Invalid arguments for search_users: {_validation_message(e)}")

        if args.query:
            users = self.directory.search(args.query, args.limit)
            text = f"Found {len(users)} users: {_names(users)}"
        else:
            users = self.directory.recent(args.limit)
            text = f"Showing recent users: {_names(users)} ({self.directory.count()} total)"

        return ToolCallResult(content=[text_content(text)])

    def create_user(self, arguments: Dict[str, Any]) -> ToolCallResult:
        try:
            user = User.model_validate(arguments)
        except ValidationError as e:
            raise ToolError(f"Invalid arguments for create_user: {_validation_message(e)}")

        user = self.directory.create(user.name, user.email, user.role)
        return ToolCallResult(content=[
            text_content(f"User created: {user.name} ({user.email}) - role: {user.role}")
        ])

    def read_recent(self, uri: str) -> ResourceReadResult:
        users = self.directory.recent()
        return ResourceReadResult(contents=[text_content(f"Recent users: {_names(users)}")])

    def read_stats(self, uri: str) -> ResourceReadResult:
        stats = {
            "total_users": self.directory.count(),
            "active_today": 42,
            "system_status": "ok",
        }
        return ResourceReadResult(contents=[text_content(json.dumps(stats, indent=2))])
