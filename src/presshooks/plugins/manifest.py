"""Pydantic schema for plugin manifests (plugin.json)."""

from pydantic import BaseModel, ConfigDict, Field


class PluginRequirements(BaseModel):
    """Version constraints a plugin declares."""

    presshooks: str | None = Field(
        default=None,
        description="Compatible presshooks version range",
    )


class PluginManifest(BaseModel):
    """Contents of a plugin's plugin.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(
        ...,
        pattern=r"^[a-z0-9_-]+$",
        description="Unique plugin slug",
    )
    version: str = Field(..., description="Plugin version (semver)")
    description: str | None = None
    author: str | None = None
    main: str = Field(
        default="plugin.py",
        description="Entry module, relative to the plugin directory",
    )
    requires: PluginRequirements | None = None
    autoload: bool = Field(
        default=False,
        description="Activate automatically on install",
    )
    show_in_admin: bool = Field(default=True, alias="showInAdmin")
