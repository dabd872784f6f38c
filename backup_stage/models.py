"""Pydantic models for the backup stage."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StageConfig(BaseModel):
    """Configuration loaded once from the environment at process start."""

    model_config = ConfigDict(frozen=True)

    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1, le=9999)
    aid: str = Field(min_length=1)

    # Backup record store
    mongo_uri: str = Field(min_length=1)
    mongo_db_name: str = Field(min_length=1)
    mongo_backup_coll: str = Field(min_length=1)

    # S3-compatible object storage
    access_key_id: str = Field(min_length=1)
    secret_access_key: str = Field(min_length=1)
    bucket_name: str = Field(min_length=1)
    endpoint_url: str = "https://storage.googleapis.com"
    signature_version: str = "s3v4"

    @field_validator("month", "year", mode="before")
    @classmethod
    def _decimal_int(cls, value):
        # "08" is August, not an invalid octal literal
        if isinstance(value, str):
            return int(value.strip(), 10)
        return value

    @field_validator("aid", mode="before")
    @classmethod
    def _lower_aid(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class BackupDescriptor(BaseModel):
    """Where one uploaded file ended up."""

    url: str
    hash: str  # hex MD5 of the uploaded bytes
    size: int


class BackupRecord(BaseModel):
    """The document persisted for one run: which files of which agency/month went where."""

    aid: str
    year: int = Field(ge=1, le=9999)
    month: int
    backups: list[BackupDescriptor] = []

    def to_document(self) -> dict:
        return self.model_dump()
