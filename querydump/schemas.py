from pydantic import BaseModel, Field
from typing import Optional
import enum


class OutputFormat(str, enum.Enum):
    json = "json"
    csv = "csv"
    sql = "sql"


class ClientOptions(BaseModel):
    """Connection options as found in a [client] section or on the command line."""

    host: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    port: Optional[int] = Field(None, ge=0, le=65535)
    charset: Optional[str] = None

    def extend(self, extra: "ClientOptions") -> "ClientOptions":
        """Return a copy where every non-empty value of `extra` wins."""
        merged = self.model_dump()
        for key, value in extra.model_dump().items():
            if value:
                merged[key] = value
        return ClientOptions(**merged)


class DumpSettings(BaseModel):
    # kept as a plain string so an unknown name is reported by the dispatcher
    format: str = Field(OutputFormat.csv.value, description="json, csv or sql")
    alias: Optional[str] = Field(None, description="Target table for sql format")
    insert_ignore: bool = False
    on_duplicate_key_update: bool = False
    batch_size: float = Field(1024, description="INSERT batch size in KiB")
    charset: str = "utf8"
    set_names: bool = True
    csv_header: bool = False
