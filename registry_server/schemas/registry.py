from pydantic import BaseModel, ConfigDict, Field


class ServiceDiscoveryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    providers_v1: str = Field(..., alias="providers.v1")


class PlatformOut(BaseModel):
    os: str
    arch: str


class ProviderVersionOut(BaseModel):
    version: str
    protocols: list[str]
    platforms: list[PlatformOut]


class ProviderVersionsResponse(BaseModel):
    versions: list[ProviderVersionOut]


class SigningKeyRecord(BaseModel):
    key_id: str
    ascii_armor: str
    trust_signature: str = ""
    source: str = ""
    source_url: str | None = None


class SigningKeysResponse(BaseModel):
    gpg_public_keys: list[SigningKeyRecord]


class DownloadDescriptor(BaseModel):
    protocols: list[str]
    os: str
    arch: str
    filename: str
    download_url: str
    shasums_url: str
    shasums_signature_url: str
    shasum: str
    signing_keys: SigningKeysResponse
