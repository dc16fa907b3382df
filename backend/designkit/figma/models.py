"""Pydantic models for design-API input (nodes and variables).

Both are read-only snapshots fetched by an external design-API client.
Field names are snake_case with camelCase aliases so a raw API payload
validates directly; unknown keys are kept (``extra="allow"``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

VariableType = Literal["color", "float", "string", "boolean"]


class BoundingBox(BaseModel):
    """Absolute bounding box of a node."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


class DesignNode(BaseModel):
    """One node of a design document tree.

    Only the fields the property extractor reads are declared; everything
    else the design API returns is preserved as extra data.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = ""
    name: str = ""
    type: str = ""
    absolute_bounding_box: Optional[BoundingBox] = Field(
        default=None, alias="absoluteBoundingBox"
    )
    fills: List[Dict[str, Any]] = Field(default_factory=list)
    strokes: List[Dict[str, Any]] = Field(default_factory=list)
    effects: List[Dict[str, Any]] = Field(default_factory=list)
    stroke_weight: Optional[float] = Field(default=None, alias="strokeWeight")
    stroke_align: Optional[str] = Field(default=None, alias="strokeAlign")
    layout_mode: Optional[str] = Field(default=None, alias="layoutMode")
    primary_axis_align_items: Optional[str] = Field(
        default=None, alias="primaryAxisAlignItems"
    )
    counter_axis_align_items: Optional[str] = Field(
        default=None, alias="counterAxisAlignItems"
    )
    item_spacing: Optional[float] = Field(default=None, alias="itemSpacing")
    padding_top: Optional[float] = Field(default=None, alias="paddingTop")
    padding_right: Optional[float] = Field(default=None, alias="paddingRight")
    padding_bottom: Optional[float] = Field(default=None, alias="paddingBottom")
    padding_left: Optional[float] = Field(default=None, alias="paddingLeft")
    corner_radius: Optional[float] = Field(default=None, alias="cornerRadius")
    rectangle_corner_radii: Optional[List[float]] = Field(
        default=None, alias="rectangleCornerRadii"
    )
    opacity: Optional[float] = None
    blend_mode: Optional[str] = Field(default=None, alias="blendMode")
    style: Optional[Dict[str, Any]] = None
    bound_variables: Optional[Dict[str, Any]] = Field(
        default=None, alias="boundVariables"
    )
    variant_properties: Optional[Dict[str, str]] = Field(
        default=None, alias="variantProperties"
    )
    component_property_definitions: Optional[Dict[str, Any]] = Field(
        default=None, alias="componentPropertyDefinitions"
    )
    children: List["DesignNode"] = Field(default_factory=list)

    def to_raw(self) -> Dict[str, Any]:
        """Dump back to the design-API (camelCase) shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


DesignNode.model_rebuild()


class DesignVariable(BaseModel):
    """A named, mode-aware value from the design tool's variables feature."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    resolved_type: VariableType = Field(default="string", alias="resolvedType")
    # mode name -> raw value (color dicts, numbers, strings, booleans)
    values_by_mode: Dict[str, Any] = Field(default_factory=dict, alias="valuesByMode")
