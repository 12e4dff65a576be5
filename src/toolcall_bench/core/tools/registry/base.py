"""Tool registry abstraction: a name-keyed store of tool definitions."""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from ..models import ToolDefinition, ToolExecutionContext, ValidationResult
from ..schema import SchemaValidator
from ...exceptions import ToolRegistrationError, UnknownToolError
from ...logger import get_logger

logger = get_logger(__name__)


class ToolRegistry(ABC):
    """
    A central registry to manage and access all available tools.

    Tools are data: a schema (pydantic model) paired with an executor. The registry is
    populated once at startup and only read afterwards.
    """

    def __init__(self, tool_timeout: Optional[float] = None) -> None:
        """Initialize the ToolRegistry.

        Args:
            tool_timeout: Optional timeout in seconds for a single tool execution.
        """
        self.tools: Dict[str, ToolDefinition] = {}
        self.tool_timeout = tool_timeout
        self._schema_cache: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        name_or_tool: Union[str, ToolDefinition],
        description: Optional[str] = None,
        args_model: Optional[Type[BaseModel]] = None,
        func: Optional[Callable[..., Any]] = None,
    ) -> None:
        """
        Register a new tool.

        Either pass a `ToolDefinition` directly or its individual components.

        Args:
            name_or_tool: Either a `ToolDefinition` object or the name of the tool.
            description: A brief description of what the tool does.
            args_model: The pydantic model validating the tool arguments.
            func: The executor, called as ``func(args, context)``.

        Raises:
            ToolRegistrationError: If components are missing or the tool already exists.
        """
        if isinstance(name_or_tool, ToolDefinition):
            tool = name_or_tool
        else:
            if description is None or args_model is None or func is None:
                raise ToolRegistrationError(
                    "If passing name as string, description, args_model and func are required."
                )
            tool = ToolDefinition(name=name_or_tool, description=description, args_model=args_model, func=func)

        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        # Fail at registration time rather than on the first prompt
        self._schema_cache[tool.name] = SchemaValidator.json_schema_for(tool.args_model)
        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name}'")

    def tool(
        self, args_model: Type[BaseModel], name: Optional[str] = None, description: Optional[str] = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """A decorator factory to register a function as a tool.

        The description defaults to the function's docstring.

        Args:
            args_model: The pydantic model validating the tool arguments.
            name: Optional name override; defaults to the function name.
            description: Optional description override.

        Returns:
            A decorator that registers the function and returns it unchanged.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            tool_name = name or func.__name__
            doc = description or inspect.getdoc(func)
            if not doc:
                msg = f"Tool '{tool_name}' missing docstring. Models need a description of what the tool does."
                logger.error(msg)
                raise ToolRegistrationError(msg)
            self.register(tool_name, description=doc, args_model=args_model, func=func)
            return func

        return decorator

    def has(self, name: str) -> bool:
        return name in self.tools

    def names(self) -> List[str]:
        return list(self.tools.keys())

    def get_args_json_schema(self, name: str) -> Dict[str, Any]:
        """Return the sanitized JSON schema of a tool's arguments.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        if name not in self.tools:
            raise UnknownToolError(f"Unknown tool: {name}")
        return self._schema_cache[name]

    def describe_for_prompt(self) -> List[Dict[str, Any]]:
        """Project every tool into a prompt-friendly description (name, description, schema)."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "argsSchema": self.get_args_json_schema(tool.name),
            }
            for tool in self.tools.values()
        ]

    @abstractmethod
    def to_function_declarations(self) -> List[Any]:
        """Project every tool into the provider's native function-declaration form."""
        pass

    def validate_args(self, name: str, raw: Any) -> ValidationResult:
        """Validate raw arguments against a tool's schema. Never raises.

        Args:
            name: Name of the tool.
            raw: Arguments as produced by the model.

        Returns:
            A successful result with the validated arguments, or a failure whose error is a
            semicolon-joined list of ``"<path>: <message>"`` issues.
        """
        tool = self.tools.get(name)
        if tool is None:
            return ValidationResult.failure(f"Unknown tool: {name}")

        try:
            parsed = tool.args_model.model_validate(raw)
        except ValidationError as exc:
            return ValidationResult.failure(self._format_issues(exc))

        return ValidationResult.success(parsed.model_dump(mode="json", exclude_none=True))

    async def execute(
        self, name: str, args: Dict[str, Any], context: Optional[ToolExecutionContext] = None
    ) -> Any:
        """Execute a tool with arguments that already passed `validate_args`.

        Exceptions raised by the executor propagate unchanged.

        Args:
            name: Name of the tool.
            args: Validated arguments.
            context: Execution context; a fresh one is built when omitted.

        Returns:
            The executor's result.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        tool = self.tools.get(name)
        if tool is None:
            raise UnknownToolError(f"Unknown tool: {name}")

        typed_args = tool.args_model.model_validate(args)
        ctx = context or ToolExecutionContext()

        logger.info(f"Executing tool '{name}'...")
        result = await self._call(tool.func, typed_args, ctx)
        logger.debug(f"Tool '{name}' executed successfully.")
        return result

    async def _call(self, func: Callable[..., Any], args: BaseModel, context: ToolExecutionContext) -> Any:
        if inspect.iscoroutinefunction(func):
            return await asyncio.wait_for(func(args, context), timeout=self.tool_timeout)

        return await asyncio.wait_for(asyncio.to_thread(func, args, context), timeout=self.tool_timeout)

    @staticmethod
    def _format_issues(exc: ValidationError) -> str:
        issues = []
        for error in exc.errors():
            loc = error.get("loc") or ()
            path = ".".join(str(part) for part in loc) if loc else "root"
            issues.append(f"{path}: {error.get('msg', 'invalid value')}")
        return "; ".join(issues)
