from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, ValidationInfo, field_validator

from query.errors import QueryValidationError
from query.types import DEFAULT_LIMIT, MAX_LIMIT, MAX_ZOOM, QueryParams


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


class TileInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    buffer: Any
    z: StrictInt
    x: StrictInt
    y: StrictInt

    @field_validator("buffer", mode="before")
    @classmethod
    def _check_buffer(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("buffer value in 'tiles' array item is null or undefined")
        if not isinstance(v, (bytes, bytearray, memoryview)):
            raise ValueError("buffer value in 'tiles' array item is not a true buffer")
        return v

    @field_validator("z", "x", "y", mode="before")
    @classmethod
    def _check_coord(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError(f"'{info.field_name}' value in 'tiles' array item is not an integer")
        if v < 0:
            raise ValueError(f"'{info.field_name}' value must not be less than zero")
        if info.field_name == "z" and v > MAX_ZOOM:
            raise ValueError(f"'z' value must be {MAX_ZOOM} or less")
        return v


class QueryOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dedupe: bool = True
    radius: float | None = None
    limit: StrictInt = DEFAULT_LIMIT
    layers: list[str] = Field(default_factory=list)
    geometry: Literal["point", "linestring", "polygon"] | None = None

    @field_validator("dedupe", mode="before")
    @classmethod
    def _check_dedupe(cls, v: Any) -> Any:
        if not isinstance(v, bool):
            raise ValueError("'dedupe' must be a boolean")
        return v

    @field_validator("radius", mode="before")
    @classmethod
    def _check_radius(cls, v: Any) -> Any:
        if v is None:
            return v
        if not _is_number(v):
            raise ValueError("'radius' must be a number")
        if v < 0:
            raise ValueError("'radius' must be a positive number")
        return float(v)

    @field_validator("limit", mode="before")
    @classmethod
    def _check_limit(cls, v: Any) -> Any:
        if not _is_number(v):
            raise ValueError("'limit' must be a number")
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("'limit' must be an integer")
            v = int(v)
        if v < 1:
            raise ValueError("'limit' must be 1 or greater")
        if v > MAX_LIMIT:
            raise ValueError(f"'limit' must be {MAX_LIMIT} or less")
        return v

    @field_validator("layers", mode="before")
    @classmethod
    def _check_layers(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            raise ValueError("'layers' must be an array of strings")
        for name in v:
            if not isinstance(name, str):
                raise ValueError("'layers' values must be strings")
            if not name:
                raise ValueError("'layers' values must be non-empty strings")
        return list(v)

    @field_validator("geometry", mode="before")
    @classmethod
    def _check_geometry(cls, v: Any) -> Any:
        if v is None:
            return v
        if not isinstance(v, str):
            raise ValueError("'geometry' option must be a string")
        if not v:
            raise ValueError("'geometry' value must be a non-empty string")
        if v not in ("point", "linestring", "polygon"):
            raise ValueError("'geometry' must be 'point', 'linestring', or 'polygon'")
        return v


class QueryRequest(BaseModel):
    """
    A validated tilequery request: tiles, query point and options.
    """

    tiles: list[TileInput] = Field(min_length=1)
    lnglat: tuple[float, float]
    options: QueryOptions = Field(default_factory=QueryOptions)

    @field_validator("tiles", mode="before")
    @classmethod
    def _check_tiles(cls, v: Any) -> Any:
        if not isinstance(v, (list, tuple)):
            raise ValueError("first arg 'tiles' must be an array of tile objects")
        if not v:
            raise ValueError("'tiles' array must be of length greater than 0")
        for item in v:
            if not isinstance(item, (dict, TileInput)):
                raise ValueError("items in 'tiles' array must be objects")
        return list(v)

    @field_validator("lnglat", mode="before")
    @classmethod
    def _check_lnglat(cls, v: Any) -> Any:
        if not isinstance(v, (list, tuple)):
            raise ValueError("second arg 'lnglat' must be an array with [longitude, latitude] values")
        if len(v) != 2:
            raise ValueError("'lnglat' must be an array of [longitude, latitude]")
        if not all(_is_number(n) for n in v):
            raise ValueError("lnglat values must be numbers")
        return tuple(float(n) for n in v)

    @field_validator("options", mode="before")
    @classmethod
    def _check_options(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, (dict, QueryOptions)):
            raise ValueError("'options' arg must be an object")
        return v

    def to_params(self) -> QueryParams:
        o = self.options
        return QueryParams(
            lon=self.lnglat[0],
            lat=self.lnglat[1],
            radius=o.radius,
            limit=o.limit,
            dedupe=o.dedupe,
            layers=frozenset(o.layers),
            geometry=o.geometry,
        )


def _format_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    msg = str(err.get("msg") or "invalid request")
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = ".".join(str(part) for part in err.get("loc") or ())
    return f"{loc}: {msg}" if loc else msg


def parse_request(tiles: Any, lnglat: Any, options: Any = None) -> QueryRequest:
    """
    Validate raw caller input; raises QueryValidationError with a readable message.
    """
    try:
        return QueryRequest.model_validate(
            {"tiles": tiles, "lnglat": lnglat, "options": options}
        )
    except ValidationError as exc:
        raise QueryValidationError(_format_error(exc)) from exc
