"""
Macro Parameter Types

Typed parameter records for the macros the registry understands, plus a raw
fallback for everything else. Together they form a tagged union keyed by
macro name (see MACRO_PARAMETER_TYPES); ``macro_parameters`` rebuilds the
typed view from a parsed Element.
"""

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, Union

from ....exceptions.parse_exceptions import MacroHandlerError
from ..types import Element


def _param(name: str, default: Any = "") -> Any:
    """Declare a dataclass field read from the macro parameter ``name``."""
    return field(default=default, metadata={"param": name})


def _freeze(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class MacroParameters:
    """
    Base class for typed macro parameters.

    Fields declared with ``_param`` are filled from the macro parameter of
    the same storage-format name; every other parameter is kept unchanged in
    ``extra``.
    """
    macro_name: ClassVar[str] = ""

    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "extra", _freeze(self.extra))

    @classmethod
    def parameter_names(cls) -> Dict[str, str]:
        """Map storage-format parameter names to field names."""
        return {f.metadata["param"]: f.name for f in fields(cls) if "param" in f.metadata}

    @classmethod
    def from_parameters(cls, params: Mapping[str, str]) -> "MacroParameters":
        names = cls.parameter_names()
        values: Dict[str, Any] = {}
        extra: Dict[str, str] = {}
        for key, value in params.items():
            if key in names:
                values[names[key]] = cls._convert(key, value)
            else:
                extra[key] = value
        return cls(extra=extra, **values)

    @classmethod
    def _convert(cls, param: str, value: str) -> Any:
        return value

    def to_attributes(self) -> Dict[str, str]:
        """Known parameters under their storage-format names, then extras."""
        attributes = dict(self.extra)
        for param, field_name in self.parameter_names().items():
            attributes[param] = str(getattr(self, field_name))
        return attributes


@dataclass(frozen=True)
class CalloutParameters(MacroParameters):
    """info, note and warning panels."""
    title: str = _param("title")


@dataclass(frozen=True)
class CodeParameters(MacroParameters):
    macro_name: ClassVar[str] = "code"

    language: str = _param("language")
    title: str = _param("title")


@dataclass(frozen=True)
class TocParameters(MacroParameters):
    """Table-of-contents macro. Levels default to 1 and 7."""
    macro_name: ClassVar[str] = "toc"

    min_level: int = _param("minLevel", 1)
    max_level: int = _param("maxLevel", 7)

    @classmethod
    def _convert(cls, param: str, value: str) -> Any:
        if param in ("minLevel", "maxLevel"):
            if not value.strip():
                return 1 if param == "minLevel" else 7
            try:
                return int(value.strip())
            except ValueError:
                raise MacroHandlerError(
                    f"toc parameter {param} must be an integer, got {value!r}",
                    macro_name="toc",
                    parameter=param,
                ) from None
        return value


@dataclass(frozen=True)
class StatusParameters(MacroParameters):
    macro_name: ClassVar[str] = "status"

    title: str = _param("title")
    colour: str = _param("colour")

    @classmethod
    def from_parameters(cls, params: Mapping[str, str]) -> "StatusParameters":
        # "color" is accepted as an alias; "colour" wins when both are set.
        params = dict(params)
        if "color" in params:
            color = params.pop("color")
            params.setdefault("colour", color)
        return super().from_parameters(params)


@dataclass(frozen=True)
class ExpandParameters(MacroParameters):
    macro_name: ClassVar[str] = "expand"

    title: str = _param("title")


@dataclass(frozen=True)
class PanelParameters(MacroParameters):
    macro_name: ClassVar[str] = "panel"

    title: str = _param("title")
    border_style: str = _param("borderStyle")
    border_color: str = _param("borderColor")
    background_color: str = _param("bgColor")
    title_background_color: str = _param("titleBGColor")


@dataclass(frozen=True)
class IssueReferenceParameters(MacroParameters):
    """External issue tracker reference (the ``jira`` macro)."""
    macro_name: ClassVar[str] = "jira"

    key: str = _param("key")
    server: str = _param("server")
    server_id: str = _param("serverId")
    jql_query: str = _param("jqlQuery")

    @property
    def is_query(self) -> bool:
        return not self.key and bool(self.jql_query)


@dataclass(frozen=True)
class RawParameters:
    """Parameters of a macro without a dedicated handler."""
    name: str
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", _freeze(self.values))

    def to_attributes(self) -> Dict[str, str]:
        return dict(self.values)


AnyMacroParameters = Union[
    CalloutParameters,
    CodeParameters,
    TocParameters,
    StatusParameters,
    ExpandParameters,
    PanelParameters,
    IssueReferenceParameters,
    RawParameters,
]


MACRO_PARAMETER_TYPES: Mapping[str, Type[MacroParameters]] = MappingProxyType({
    "info": CalloutParameters,
    "note": CalloutParameters,
    "warning": CalloutParameters,
    "code": CodeParameters,
    "noformat": CodeParameters,
    "toc": TocParameters,
    "status": StatusParameters,
    "expand": ExpandParameters,
    "panel": PanelParameters,
    "jira": IssueReferenceParameters,
})

# Derived attributes a handler adds on top of the macro's own parameters.
DERIVED_MACRO_ATTRIBUTES = frozenset({"name", "isBlock"})


def macro_parameters(element: Element) -> Optional[AnyMacroParameters]:
    """
    Rebuild the typed parameter record for an element produced by a macro.

    Returns None for elements that did not come from a macro (no ``name``
    attribute). Source attributes of the macro tag itself (``ac:*``) are not
    parameters and are left out.
    """
    name = element.attributes.get("name")
    if name is None:
        return None

    params = {
        key: value for key, value in element.attributes.items()
        if key not in DERIVED_MACRO_ATTRIBUTES and not key.startswith("ac:")
    }
    parameter_type = MACRO_PARAMETER_TYPES.get(name.lower())
    if parameter_type is None:
        return RawParameters(name=name, values=params)
    return parameter_type.from_parameters(params)
