"""Record and configuration models.

A :class:`Record` holds one domain's routes: an optional default route for
the domain root and an ordered list of path routes. :class:`DotLocalConfig`
is the whole persisted document.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Sentinel for "no default route, path routes only"
NO_DEFAULT_PORT = -1


class Record(BaseModel):
    """Routing rules for a single local domain."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    domain: str = Field(min_length=1, description="Fully-qualified local domain")
    paths: list[tuple[str, int]] = Field(
        default_factory=list, description="(path prefix, port) in insertion order"
    )
    default_port: int = Field(
        default=NO_DEFAULT_PORT,
        alias="port",
        description="Port for the domain root, -1 for none",
    )

    @property
    def has_default_route(self) -> bool:
        return self.default_port != NO_DEFAULT_PORT

    @property
    def is_empty(self) -> bool:
        """True when the record routes nothing and should be dropped."""
        return not self.has_default_route and not self.paths

    def to_caddy_block(self, ip: str, automatic_https_redirect: bool) -> str:
        """Generate this record's Caddyfile site block.

        Args:
            ip: Address the upstream servers listen on
            automatic_https_redirect: Let caddy redirect HTTP to HTTPS

        Returns:
            Site block without a trailing newline
        """
        domain = self.domain
        if automatic_https_redirect:
            lines = [f"{domain} {{"]
        else:
            lines = [f"http://{domain} https://{domain} {{"]

        if self.has_default_route:
            lines.append(f"\treverse_proxy {ip}:{self.default_port}")

        for prefix, port in self.paths:
            lines.append(f"\treverse_proxy {prefix} {ip}:{port}")

        lines.append("}")
        return "\n".join(lines)


class DotLocalConfig(BaseModel):
    """Persisted record set and global flags."""

    records: dict[str, Record] = Field(
        default_factory=dict, description="Records keyed by domain, insertion ordered"
    )
    automatic_https_redirect: bool = Field(default=True)
    lan_enabled: bool = Field(default=True)

    @model_validator(mode="after")
    def check_record_keys(self) -> "DotLocalConfig":
        """Every key must equal the domain of the record it maps to."""
        for key, record in self.records.items():
            if key != record.domain:
                raise ValueError(
                    f"Record key '{key}' does not match domain '{record.domain}'"
                )
        return self

    def records_list(self) -> list[Record]:
        return list(self.records.values())

    def to_json(self) -> str:
        """Serialize to the on-disk JSON document."""
        return self.model_dump_json(by_alias=True, indent=2)
