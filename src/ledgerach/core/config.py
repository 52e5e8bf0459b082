"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

import os
from typing import Literal

from pydantic_settings import BaseSettings

LINE_SEPARATORS = {"lf": "\n", "crlf": "\r\n"}


class NachaConfig(BaseSettings):
    """ODFI/file-header identity and file layout options."""

    model_config = {"env_prefix": "LEDGERACH_NACHA_"}

    immediate_destination: str = "021000021"  # ODFI routing number
    immediate_destination_name: str = "JPMORGAN CHASE"
    immediate_origin: str = "1234567890"  # usually "1" + company EIN
    immediate_origin_name: str = "LEDGERACH"
    default_file_id_modifier: str = "A"
    line_separator: Literal["native", "lf", "crlf"] = "native"
    storage_prefix: str = "ach-files/"

    @property
    def line_terminator(self) -> str:
        return LINE_SEPARATORS.get(self.line_separator, os.linesep)


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration."""

    model_config = {"env_prefix": "LEDGERACH_DYNAMO_"}

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis lock configuration."""

    model_config = {"env_prefix": "LEDGERACH_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    lock_ttl_seconds: int = 300


class S3Config(BaseSettings):
    """S3 file storage configuration."""

    model_config = {"env_prefix": "LEDGERACH_S3_"}

    bucket: str = "ledgerach-ach-files"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "LEDGERACH_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    nacha: NachaConfig = NachaConfig()
    dynamodb: DynamoDBConfig = DynamoDBConfig()
    redis: RedisConfig = RedisConfig()
    s3: S3Config = S3Config()
