"""Run configuration: tool locations, required versions and signing identity."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from debugapk.helpers.subprocess import ToolDescriptor

DEFAULT_DNAME = "CN=Unknown, OU=Unknown, O=Unknown, L=Unknown, S=Unknown, C=Unknown"

# Environment variable -> config field
_ENV_OVERRIDES = {
    "DEBUGAPK_APKTOOL": "apktool",
    "DEBUGAPK_APKTOOL_VERSION": "apktool_version",
    "DEBUGAPK_KEYTOOL": "keytool",
    "DEBUGAPK_JARSIGNER": "jarsigner",
    "DEBUGAPK_KEY_ALIAS": "key_alias",
    "DEBUGAPK_KEY_PASSWORD": "key_password",
}


class PipelineConfig(BaseModel):
    """Everything a run needs to know about its tools and signing identity.

    Passed explicitly to the environment check and the pipeline so that two
    runs never share state.
    """

    model_config = ConfigDict(frozen=True)

    apktool: ToolDescriptor = ToolDescriptor("apktool")
    apktool_version: str = "2.5.0"
    keytool: str = "keytool"
    jarsigner: str = "jarsigner"
    key_alias: str = Field(default="alias1", min_length=1)
    # Used for both the key and the key-store
    key_password: str = Field(default="password", min_length=6)
    key_dname: str = DEFAULT_DNAME
    key_algorithm: str = "RSA"

    @property
    def fallback_jar(self) -> str:
        """Name of the apktool jar looked up in the working directory."""
        return f"apktool_{self.apktool_version}.jar"

    @property
    def keytool_tool(self) -> ToolDescriptor:
        return ToolDescriptor(self.keytool)

    @property
    def jarsigner_tool(self) -> ToolDescriptor:
        return ToolDescriptor(self.jarsigner)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> PipelineConfig:
        """Build a config from DEBUGAPK_* environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for var, field_name in _ENV_OVERRIDES.items():
            value = env.get(var)
            if not value:
                continue
            if field_name == "apktool":
                values[field_name] = ToolDescriptor(value)
            else:
                values[field_name] = value
        return cls(**values)
