"""Binding registry types.

Default bindings and ``:`` commands are imported from their own modules
(``definitions``, ``commands``) so this package stays cheap to import.
"""

from .registry import ActionContext, Binding, BindingMatch, BindingRegistry

__all__ = ["ActionContext", "Binding", "BindingMatch", "BindingRegistry"]
