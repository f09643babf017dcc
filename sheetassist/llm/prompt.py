from __future__ import annotations

import json

from sheetassist.llm.providers.base import PromptParts, RequestContext


def _system_prompt(ctx: RequestContext) -> str:
    cell = ctx.selected_cell.label if ctx.selected_cell is not None else None
    surrounding = json.dumps(ctx.surrounding_data, indent=2, ensure_ascii=False, default=str)
    return (
        "You are an AI assistant for a spreadsheet application. "
        "You can analyze data, generate formulas, suggest fill patterns, and provide insights.\n"
        f"Current cell: {cell}\n"
        f'Cell value: "{ctx.cell_value}"\n'
        f"Surrounding data: {surrounding}\n\n"
        "When suggesting cell updates, include them in your response in this format:\n"
        'Cell Updates: [{"row": 0, "col": 1, "value": "example"}]\n'
        'Actions: [{"description": "Apply formula", "cellUpdates": [...]}]'
    )


def build_prompt(ctx: RequestContext) -> PromptParts:
    return PromptParts(system=_system_prompt(ctx), user=ctx.prompt)


def inline_prompt(prompt: PromptParts) -> str:
    """Single-message rendering for providers without a system role."""
    if prompt.system is None:
        return prompt.user
    return f"{prompt.system}\n\nUser request: {prompt.user}"
