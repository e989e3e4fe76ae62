"""Label template configuration models."""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
)
from pydantic.alias_generators import to_camel


class TemplateModel(BaseModel):
    """Base model accepting the camelCase keys used in template JSON files."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ElementType(StrEnum):
    """Drawing primitives understood by the renderer."""

    TEXT = "text"
    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    STRIPES = "stripes"
    GRID = "grid"


class HorizontalAlignment(StrEnum):
    """Horizontal text alignment."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class StripeDirection(StrEnum):
    """Axis along which stripes repeat."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Position(TemplateModel):
    """A point in template units."""

    x: float
    y: float


class Bounds(TemplateModel):
    """Rectangular region in template units."""

    x: float
    y: float
    width: float
    height: float


class TextElement(TemplateModel):
    """Text element. ``content`` may contain ``${name}`` placeholders."""

    type: Literal["text"] = "text"
    content: str
    position: Position
    font_size: float | None = None
    font_family: str | None = None
    align: HorizontalAlignment = Field(
        default=HorizontalAlignment.LEFT,
        validation_alias=AliasChoices("align", "alignment"),
    )


class LineElement(TemplateModel):
    """Straight line between two points."""

    type: Literal["line"] = "line"
    start: Position
    end: Position
    width: float = 1  # Stroke width


class RectangleElement(TemplateModel):
    """Rectangle anchored at its top-left corner."""

    type: Literal["rectangle"] = "rectangle"
    position: Position
    width: float
    height: float
    filled: bool = False


class CircleElement(TemplateModel):
    """Circle given by center and radius."""

    type: Literal["circle"] = "circle"
    center: Position
    radius: float
    filled: bool = False


class StripeElement(TemplateModel):
    """Repeating solid bars, clipped to bounds (whole canvas by default)."""

    type: Literal["stripes"] = "stripes"
    direction: StripeDirection
    spacing: float
    width: float  # Bar thickness
    bounds: Bounds | None = None


class GridElement(TemplateModel):
    """Evenly spaced rule lines, clipped to bounds (whole canvas by default)."""

    type: Literal["grid"] = "grid"
    cell_width: float
    cell_height: float
    line_width: float = 1
    bounds: Bounds | None = None


class UnknownElement(TemplateModel):
    """Element with a type tag the renderer does not know.

    Kept (with all of its keys) so rendering can report and skip it rather
    than rejecting the whole template.
    """

    model_config = ConfigDict(extra="allow")

    type: Any = None


class InvalidElement(TemplateModel):
    """Element of a known type whose fields do not validate.

    Holds the raw element and the validation error so rendering can report
    and skip it.
    """

    type: Any = None
    data: Any = None
    error: str


ELEMENT_TYPES = frozenset(ElementType)


def _element_tag(value: Any) -> str:
    """Pick the union member for a raw or already-parsed element."""
    if isinstance(value, InvalidElement):
        return "invalid"
    if isinstance(value, UnknownElement):
        return "unknown"
    if isinstance(value, dict):
        tag = value.get("type")
    else:
        tag = getattr(value, "type", None)
    if isinstance(tag, str) and tag in ELEMENT_TYPES:
        return str(tag)
    return "unknown"


_TaggedElement = Annotated[
    Annotated[TextElement, Tag("text")]
    | Annotated[LineElement, Tag("line")]
    | Annotated[RectangleElement, Tag("rectangle")]
    | Annotated[CircleElement, Tag("circle")]
    | Annotated[StripeElement, Tag("stripes")]
    | Annotated[GridElement, Tag("grid")]
    | Annotated[UnknownElement, Tag("unknown")]
    | Annotated[InvalidElement, Tag("invalid")],
    Discriminator(_element_tag),
]


def _keep_invalid_element(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Turn an element that fails validation into an InvalidElement."""
    try:
        return handler(value)
    except ValidationError as e:
        tag = value.get("type") if isinstance(value, dict) else None
        problems = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"][1:]) or "element"
            problems.append(f"{field}: {error['msg']}")
        return InvalidElement(type=tag, data=value, error="; ".join(problems))


# Invalid elements are kept and skipped at render time
RenderElement = Annotated[_TaggedElement, WrapValidator(_keep_invalid_element)]


class TemplateDimensions(TemplateModel):
    """Per-template override of the base image dimensions.

    Zero or missing values fall back to the base dimensions.
    """

    width: int | None = None
    height: int | None = None


class DefaultFont(TemplateModel):
    """Font used by text elements that do not set their own."""

    family: str = "Arial"
    size: float = 12


class RenderTemplate(TemplateModel):
    """A declarative label: ordered drawing primitives plus default styling."""

    name: str
    description: str | None = None
    dimensions: TemplateDimensions | None = None
    default_font: DefaultFont | None = None
    elements: list[RenderElement] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Template name cannot be empty")
        return value

    def to_debug_dict(self) -> dict[str, Any]:
        """Dump elements the way they were rendered, for debug sidecars."""
        return {
            "template": self.name,
            "description": self.description,
            "elements": [
                {
                    "index": index + 1,
                    "elementType": str(element.type),
                    **element.model_dump(by_alias=True, exclude_none=True, mode="json"),
                }
                for index, element in enumerate(self.elements)
            ],
        }
