"""Pydantic models for type-safe data structures."""

from enum import Enum
from pathlib import Path
import re
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import (
    EmptyVariantsError,
    ErrorKind,
    FontifyError,
    UnsupportedVariantError,
    error_kind_for,
)

T = TypeVar("T")


class FontSource(str, Enum):
    """Where a font reference was found."""

    HOST_SETTING = "host-setting"
    STYLESHEET = "stylesheet"
    UTILITY_CONFIG = "utility-config"
    MANIFEST = "manifest"


class FontFormat(str, Enum):
    """Font binary formats served by the catalog."""

    WOFF2 = "woff2"
    WOFF = "woff"
    TTF = "ttf"


class HostingStrategy(str, Enum):
    """Which production artifacts a bundle produces."""

    SELF_HOSTED = "self-hosted"
    CDN = "cdn"
    BOTH = "both"

    @property
    def self_hosted(self) -> bool:
        return self in (HostingStrategy.SELF_HOSTED, HostingStrategy.BOTH)

    @property
    def uses_cdn(self) -> bool:
        return self in (HostingStrategy.CDN, HostingStrategy.BOTH)


class Framework(str, Enum):
    """Code generation targets."""

    VANILLA = "vanilla"
    NEXTJS = "nextjs"
    REACT = "react"
    VUE = "vue"
    CUSTOM = "custom"


class DetectedFontReference(BaseModel):
    """A font family name found in a project."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    source: FontSource
    origin_path: Path | None = None
    known_installed: bool | None = None

    @property
    def key(self) -> str:
        """Deduplication key."""
        return self.name.lower()


class CatalogEntry(BaseModel):
    """A family as listed by the remote catalog."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    family: str
    available_variants: list[str] = Field(default_factory=list, alias="variants")
    supported_subsets: set[str] = Field(default_factory=set, alias="subsets")
    file_urls_by_variant: dict[str, str] = Field(default_factory=dict, alias="files")
    category: str | None = None

    @property
    def normalized_family(self) -> str:
        return normalize_family(self.family)


class FontFileDescriptor(BaseModel):
    """One downloadable font file for a family/variant."""

    family: str
    variant: str
    source_url: str
    format: FontFormat = FontFormat.WOFF2
    subset: str | None = None

    @property
    def numeric_weight(self) -> int:
        return variant_to_weight(self.variant)


class BundleOptions(BaseModel):
    """Per-run bundling choices."""

    strategy: HostingStrategy = HostingStrategy.SELF_HOSTED
    variants: list[str] = Field(default_factory=lambda: ["regular", "500", "600", "700"])
    output_dir: str = "assets/fonts"
    framework: Framework = Framework.VANILLA
    include_preload: bool = True

    @field_validator("variants")
    @classmethod
    def validate_variants(cls, v: list[str]) -> list[str]:
        if not v:
            raise EmptyVariantsError()
        for variant in v:
            variant_to_weight(variant)
        return v

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        from .config import check_relative_output_dir

        return check_relative_output_dir(v)


class BundleResult(BaseModel):
    """Outcome of bundling one font."""

    font_family: str
    strategy: HostingStrategy
    written_font_file_paths: list[Path] = Field(default_factory=list)
    css_file_path: Path | None = None
    license_file_path: Path | None = None
    framework_module_path: Path | None = None
    framework_snippet: str | None = None
    cdn_url: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @property
    def slug(self) -> str:
        return sanitize_font_name(self.font_family)

    @property
    def succeeded(self) -> bool:
        """A self-hosted bundle with zero written files counts as failed."""
        if self.error:
            return False
        if self.strategy.self_hosted:
            return bool(self.written_font_file_paths)
        return True


class BundleRun(BaseModel):
    """All per-font results of one bundling run plus the guide location."""

    results: list[BundleResult] = Field(default_factory=list)
    guide_path: Path | None = None

    @property
    def failed(self) -> list[BundleResult]:
        return [r for r in self.results if not r.succeeded]


class FrameworkSuggestion(BaseModel):
    """Best-effort framework and output directory guess for a project."""

    name: Framework
    default_output_dir: str
    was_detected_from_manifest: bool = False


class InstallResult(BaseModel):
    """Outcome of installing one font into the user fonts directory."""

    font_name: str
    success: bool
    source: str = "catalog"
    installed_files: list[Path] = Field(default_factory=list)
    error: str | None = None
    error_kind: ErrorKind | None = None
    requires_reload: bool = False


class FontAvailability(BaseModel):
    """Catalog availability for a family."""

    available: bool
    source: str | None = None
    variants: list[str] = Field(default_factory=list)
    license: str | None = None


class OperationResult(BaseModel, Generic[T]):
    """Success/failure result returned by every public entry point."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    value: T | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(
        cls, error: BaseException | str, kind: ErrorKind | None = None
    ) -> "OperationResult[T]":
        if isinstance(error, BaseException):
            kind = kind or error_kind_for(error)
            message = str(error) or type(error).__name__
        else:
            message = error
        return cls(success=False, error=message, error_kind=kind or ErrorKind.INTERNAL)

    @property
    def exit_code(self) -> int:
        if self.success:
            return 0
        return (self.error_kind or ErrorKind.INTERNAL).exit_code

    def unwrap(self) -> T:
        """Return the value or raise the failure as a FontifyError."""
        if not self.success:
            raise FontifyError(self.error or "Operation failed")
        return self.value


_WEIGHT_ALIASES: dict[str, int] = {"regular": 400, "normal": 400, "bold": 700}


def variant_to_weight(variant: str) -> int:
    """Map a variant label (``regular``, ``bold``, ``500``) to a numeric weight."""
    label = str(variant).strip().lower()
    if label in _WEIGHT_ALIASES:
        return _WEIGHT_ALIASES[label]
    if label.isdigit() and 1 <= int(label) <= 1000:
        return int(label)
    raise UnsupportedVariantError(variant)


def weight_to_variant(weight: str | int) -> str:
    """Inverse of ``variant_to_weight`` for catalog output: 400 becomes ``regular``."""
    label = str(weight).strip()
    return "regular" if label == "400" else label


def sanitize_font_name(name: str) -> str:
    """Replace every non-alphanumeric character with a hyphen and collapse runs."""
    return re.sub(r"-+", "-", re.sub(r"[^a-zA-Z0-9]", "-", name))


def normalize_family(name: str) -> str:
    """Catalog comparison form: whitespace removed, lower-cased."""
    return "".join(name.split()).lower()
