"""Meta information about script classes and the functions they expose."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from .util import IString


@dataclass(frozen=True)
class FunctionParameter:
    """A script-side type name and, optionally, a default argument name."""

    tes_type_name: str = ""
    tes_arg_name: str = ""


def function_parameter_make(type_name: Optional[str], arg_name: Optional[str]) -> FunctionParameter:
    return FunctionParameter(type_name or "", arg_name or "")


class ObjectHandle(int):
    """An integer that identifies a container object."""


class Form:
    """Marker type for a game form."""


class FormList(Form):
    """Marker type for a list of game forms."""


_TYPE_INFO: dict[Any, FunctionParameter] = {
    None: function_parameter_make("void", None),
    type(None): function_parameter_make("void", None),
    bool: function_parameter_make("Bool", None),
    str: function_parameter_make("String", None),
    float: function_parameter_make("Float", None),
    int: function_parameter_make("Int", None),
    ObjectHandle: function_parameter_make("Int", "object"),
    Form: function_parameter_make("Form", None),
    FormList: function_parameter_make("FormList", None),
}


def type_info(tp: Any) -> FunctionParameter:
    """Return the script type description of a Python type.

    Raises TypeError for a type that has no script counterpart.
    """
    try:
        return _TYPE_INFO[tp]
    except (KeyError, TypeError):
        raise TypeError(f"no script type for {tp!r}") from None


CommentSource = Union[str, Callable[[], str], None]


@dataclass
class FunctionInfo:
    """Description of one function exported to scripts."""

    name: str = ""
    argument_names: str = ""
    param_list_func: Optional[Callable[[], list[FunctionParameter]]] = None
    tes_func: Optional[Callable[..., Any]] = None
    c_func: Optional[Callable[..., Any]] = None
    stateless: bool = True
    _comment_func: Optional[Callable[[], str]] = field(default=None, init=False, repr=False)
    _comment_str: Optional[str] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.name = IString(self.name)

    def parameters(self) -> list[FunctionParameter]:
        """Return type, then parameter types; empty if unknown."""
        return list(self.param_list_func()) if self.param_list_func else []

    def comment(self) -> str:
        if self._comment_func is not None:
            return self._comment_func()
        return self._comment_str or ""

    def set_comment(self, comment: CommentSource) -> None:
        """Set a comment text or generator; None clears both."""
        if comment is None:
            self._comment_func = None
            self._comment_str = None
        elif isinstance(comment, str):
            self._comment_str = comment
        elif callable(comment):
            self._comment_func = comment
        else:
            raise TypeError("comment must be a string, a callable or None")


class PapyrusTextBlock:
    """A block of script text, fixed or produced on demand."""

    def __init__(self, text: Union[str, Callable[[], str]]) -> None:
        if not isinstance(text, str) and not callable(text):
            raise TypeError("text must be a string or a callable")
        self._text = text

    def get_text(self) -> str:
        return self._text if isinstance(self._text, str) else self._text()


@dataclass
class ClassInfo:
    """Description of one script class."""

    class_name: str = ""
    methods: list[FunctionInfo] = field(default_factory=list)
    text_blocks: list[PapyrusTextBlock] = field(default_factory=list)
    extends_class: str = ""
    comment: str = ""
    version: int = 0

    def __post_init__(self) -> None:
        self.class_name = IString(self.class_name)
        self.extends_class = IString(self.extends_class)

    def initialized(self) -> bool:
        return bool(self.class_name)

    def add_text_block(self, block: Union[PapyrusTextBlock, str, Callable[[], str]]) -> None:
        if not isinstance(block, PapyrusTextBlock):
            block = PapyrusTextBlock(block)
        self.text_blocks.append(block)

    def find_function(self, name: str) -> Optional[FunctionInfo]:
        return next((fi for fi in self.methods if fi.name == name), None)

    def add_function(self, info: FunctionInfo) -> None:
        if self.find_function(info.name) is not None:
            raise ValueError(f"function {info.name!s} is already defined in {self.class_name!s}")
        self.methods.append(info)

    def _require_initialized(self) -> None:
        if not self.initialized():
            raise RuntimeError("class has no name")

    def visit_functions(self, visitor: Callable[[FunctionInfo], Any]) -> None:
        self._require_initialized()
        for info in self.methods:
            visitor(info)

    def merge_with_extension(self, extension: "ClassInfo") -> None:
        """Add the functions of another description of the same class."""
        self._require_initialized()
        if self.class_name != extension.class_name:
            raise ValueError("extension describes a different class")
        if self.extends_class != extension.extends_class:
            raise ValueError("extension extends a different class")
        for info in extension.methods:
            self.add_function(info)

    def copy(self) -> "ClassInfo":
        duplicate = copy.copy(self)
        duplicate.methods = [copy.copy(m) for m in self.methods]
        duplicate.text_blocks = list(self.text_blocks)
        return duplicate


ClassInfoCreator = Callable[[], ClassInfo]


class ClassRegistry:
    """Collects class descriptions; descriptions sharing a name are merged."""

    def __init__(self, creators: Iterable[ClassInfoCreator] = ()) -> None:
        self._creators: list[ClassInfoCreator] = list(creators)
        self._classes: Optional[dict[IString, ClassInfo]] = None
        self._lock = threading.Lock()

    def register(self, creator: ClassInfoCreator) -> ClassInfoCreator:
        """Add a function that creates a class description; usable as a decorator."""
        with self._lock:
            self._creators.append(creator)
            self._classes = None
        return creator

    def _build(self) -> dict[IString, ClassInfo]:
        db: dict[IString, ClassInfo] = {}
        for creator in self._creators:
            info = creator()
            key = IString(info.class_name)
            found = db.get(key)
            if found is not None:
                found.merge_with_extension(info)
            else:
                db[key] = info.copy()
        return {key: db[key] for key in sorted(db, key=str.lower)}

    def classes(self) -> dict[IString, ClassInfo]:
        """Every class by name, in case-insensitive name order."""
        with self._lock:
            if self._classes is None:
                self._classes = self._build()
            return self._classes

    def find_function_of_class(self, function_name: str, class_name: str) -> Optional[FunctionInfo]:
        cls = self.classes().get(IString(class_name))
        return cls.find_function(function_name) if cls is not None else None


default_registry = ClassRegistry()


def amalgamate_classes(amalgam_name: str, classes: Mapping[str, ClassInfo]) -> ClassInfo:
    """Gather the functions that need state into one class, prefixed by class name."""
    amalgam = ClassInfo(amalgam_name)
    for cls in classes.values():
        for func in cls.methods:
            if not func.stateless:
                info = copy.copy(func)
                info.set_comment(None)
                info.name = IString(cls.class_name + "_" + func.name)
                amalgam.add_function(info)
    return amalgam