"""S3 config."""

from pydantic import AliasChoices, AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from s3gate.files.s3.pydantic import S3Credentials, S3Endpoint

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; s3gate/1.0)"


class S3Config(BaseSettings):
    """S3 configuration.

    This config is used to configure the S3 client. Values are read from
    `S3_`-prefixed environment variables; credentials are also accepted as
    `MINIO_ACCESS_KEY` and `MINIO_SECRET_KEY`.

    Attributes:
        access_key (str): Access key ID for signing requests.
        secret_key (SecretStr): Secret access key for signing requests. Never logged.
        endpoint_url (AnyHttpUrl): Scheme and host of the S3-compatible provider.
        bucket (str): Bucket every operation works on.
        region (str): Signing region. Must match what the provider enforces. Defaults to "us-east-1".
        service (str): Signing service name. Defaults to "s3".
        public_base_url (AnyHttpUrl | None): Base of public object URLs. Defaults to {endpoint_url}/{bucket}.
        user_agent (str): Unsigned User-Agent sent to the provider. Some WAFs challenge
            non-browser clients, a browser-like value avoids that.
        accept (str): Unsigned Accept header sent to the provider.
        timeout_seconds (float): Deadline for a single provider call.
        verify (bool | str): TLS verification: True, False, or a CA bundle path.

    """

    model_config = SettingsConfigDict(env_prefix="S3_", populate_by_name=True, extra="ignore")

    access_key: str = Field(
        min_length=1,
        validation_alias=AliasChoices("S3_ACCESS_KEY", "MINIO_ACCESS_KEY"),
        description="Access key ID for signing requests.",
    )
    secret_key: SecretStr = Field(
        validation_alias=AliasChoices("S3_SECRET_KEY", "MINIO_SECRET_KEY"),
        description="Secret access key for signing requests.",
    )
    endpoint_url: AnyHttpUrl = Field(description="Scheme and host of the S3-compatible provider.")
    bucket: str = Field(min_length=1, description="Bucket every operation works on.")
    region: str = Field(default="us-east-1", description="Signing region.")
    service: str = Field(default="s3", description="Signing service name.")
    public_base_url: AnyHttpUrl | None = Field(default=None, description="Base of public object URLs.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Unsigned User-Agent sent to the provider.")
    accept: str = Field(default="*/*", description="Unsigned Accept header sent to the provider.")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Deadline for a single provider call.")
    verify: bool | str = Field(default=True, description="TLS verification: True, False, or a CA bundle path.")

    def to_credentials(self) -> S3Credentials:
        """Credentials for the signer."""
        return S3Credentials(access_key=self.access_key, secret_key=self.secret_key)

    def to_endpoint(self) -> S3Endpoint:
        """Endpoint for the signer and the client."""
        return S3Endpoint(
            url=str(self.endpoint_url).rstrip("/"),
            bucket=self.bucket,
            region=self.region,
            service=self.service,
            public_base_url=str(self.public_base_url).rstrip("/") if self.public_base_url else None,
        )
