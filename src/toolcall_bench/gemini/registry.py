"""Adapt registered tool definitions into Gemini function declarations."""

from typing import List, Optional

from google.genai import types

from ..core.tools import ToolRegistry


class GeminiToolRegistry(ToolRegistry):
    """
    A specialized ToolRegistry for Google Gemini models.

    Every registered tool is exported as a `types.FunctionDeclaration` whose parameters are
    the sanitized JSON schema of the tool's arguments model.
    """

    def to_function_declarations(self) -> List[types.FunctionDeclaration]:
        return [
            types.FunctionDeclaration(
                name=tool.name,
                description=tool.description,
                parameters_json_schema=self.get_args_json_schema(tool.name),
            )
            for tool in self.tools.values()
        ]

    @property
    def tool_object(self) -> Optional[types.Tool]:
        """
        Generates a `types.Tool` object containing all registered function declarations,
        or None if no tools are registered.
        """
        if not self.tools:
            return None
        return types.Tool(function_declarations=self.to_function_declarations())
