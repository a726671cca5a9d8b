"""
blockarm_exceptions.py

Central exception hierarchy for the BlockArm planner.
Defines specialised exception classes for the different failure scenarios.

Exception hierarchy:
    BlockArmException (base)
    ├── WorldException
    │   ├── WorldDefinitionError
    │   └── UnknownObjectError
    ├── GoalException
    │   └── InvalidLiteralError
    ├── PlanningException
    │   ├── NoPlanFoundError
    │   ├── PlanningFailedError
    │   ├── InvalidActionError
    │   └── InvalidStateError
    │       └── PlanEncodingError
    └── ConfigurationException
        └── InvalidConfigError

Usage:
    from blockarm_exceptions import NoPlanFoundError

    try:
        result = planner.plan_formula(formula, world)
    except NoPlanFoundError as e:
        logger.warning(f"No plan: {e}")
        logger.warning(f"Context: {e.context}")
"""

from typing import Any, Dict, List, Optional


class BlockArmException(Exception):
    """
    Base exception for all BlockArm-specific errors.

    All BlockArm exceptions support:
    - Detailed error messages
    - Contextual information (dict)
    - Original exception chaining (via 'from')
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# ============================================================================
# WORLD EXCEPTIONS
# ============================================================================


class WorldException(BlockArmException):
    """Base exception for errors in world definitions."""


class WorldDefinitionError(WorldException):
    """
    A world definition could not be built.

    Causes:
    - World file missing or not valid YAML
    - Missing keys (stacks, objects)
    - Arm index outside of the columns
    """

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["source"] = source
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class UnknownObjectError(WorldException):
    """An object identifier is not in the object registry."""

    def __init__(self, message: str, object_id: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["object_id"] = object_id
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# GOAL EXCEPTIONS
# ============================================================================


class GoalException(BlockArmException):
    """Base exception for malformed goal formulas."""


class InvalidLiteralError(GoalException):
    """
    A literal cannot be interpreted.

    Causes:
    - Unknown relation name
    - Wrong number of arguments for the relation
    - Unparseable literal text
    """

    def __init__(self, message: str, literal: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["literal"] = literal
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# PLANNING EXCEPTIONS
# ============================================================================


class PlanningException(BlockArmException):
    """Base exception for planning errors."""


class NoPlanFoundError(PlanningException):
    """
    The search ended before the goal formula was satisfied.

    Reasons:
    - exhausted: every reachable state was explored
    - timeout: the wall-clock deadline elapsed
    - expansion_limit: the configured expansion budget was used up
    """

    def __init__(
        self,
        message: str,
        formula: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["formula"] = formula
        context["reason"] = reason
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.reason = reason


class PlanningFailedError(PlanningException):
    """Every candidate interpretation failed to produce a plan."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[BlockArmException]] = None,
        **kwargs,
    ):
        self.errors = list(errors or [])
        context = kwargs.get("context", {})
        context["failed_candidates"] = len(self.errors)
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class InvalidActionError(PlanningException):
    """A primitive action is not applicable in the given state."""

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        step_index: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["action"] = action
        context["step_index"] = step_index
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class InvalidStateError(PlanningException):
    """
    A planning state violates the world invariants.

    This is an internal error, not a domain failure:
    - Object present in two places or duplicated
    - Object missing from the state
    - Arm outside of the columns
    """


class PlanEncodingError(InvalidStateError):
    """Two consecutive states on a path are not linked by one primitive action."""


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(BlockArmException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Unknown heuristic name
    - Negative timeout or penalty
    - Malformed YAML file
    """


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception,
    blockarm_exception_class: type[BlockArmException],
    message: str,
    **context,
) -> BlockArmException:
    """
    Convert a generic exception into a BlockArm-specific exception.

    Args:
        exc: Original exception
        blockarm_exception_class: Target class (e.g. WorldDefinitionError)
        message: Custom error message
        **context: Additional context information

    Returns:
        BlockArm exception chained to the original exception

    Example:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as e:
            raise wrap_exception(e, WorldDefinitionError, "Bad world file", path=path)
    """
    return blockarm_exception_class(
        message=message, context=context, original_exception=exc
    )


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing message from an exception.

    Args:
        exc: Exception object
        include_details: Whether to append technical details (debug mode)

    Returns:
        User-friendly error message
    """
    friendly_messages = {
        WorldDefinitionError: "[ERROR] The world definition is invalid.",
        UnknownObjectError: "[ERROR] The world does not contain that object.",
        InvalidLiteralError: "[ERROR] The goal could not be understood.",
        NoPlanFoundError: "[ERROR] I could not find a way to do that.",
        PlanningFailedError: "[ERROR] None of the interpretations can be achieved.",
        InvalidActionError: "[ERROR] That move is not possible right now.",
        InvalidStateError: "[ERROR] Internal error: the world state is inconsistent.",
        PlanEncodingError: "[ERROR] Internal error: the plan could not be encoded.",
        InvalidConfigError: "[ERROR] Invalid configuration. Please check the settings.",
    }

    default_message = "[ERROR] An unexpected error occurred."

    exc_type = type(exc)
    user_message = friendly_messages.get(exc_type, default_message)

    if isinstance(exc, NoPlanFoundError) and exc.reason == "timeout":
        user_message = "[ERROR] Planning took too long and was stopped."

    elif isinstance(exc, UnknownObjectError) and exc.context.get("object_id"):
        user_message = (
            f"[ERROR] The world does not contain an object '{exc.context['object_id']}'."
        )

    if include_details and isinstance(exc, BlockArmException):
        user_message += f"\n\nTechnical details: {exc.message}"
        if exc.context:
            user_message += f"\n   Context: {exc.context}"

    return user_message
