from .mode import SelectMode, DrawMode, EditMode, EditorMode
from .state import EditorState
from .machine import Editor, transition

__all__ = [
    "SelectMode",
    "DrawMode",
    "EditMode",
    "EditorMode",
    "EditorState",
    "Editor",
    "transition",
]
