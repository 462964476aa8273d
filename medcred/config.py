"""Medical credential issuer configuration constants.

Environment-based configuration in three tiers:
- NORMATIVE: Fixed by the proof circuit and the credential layout
- CONFIGURABLE: Defaults that deployments may override
- OPERATIONAL: Deployment-specific settings (env vars)
"""
import os
from pathlib import Path
from typing import Optional


# =============================================================================
# NORMATIVE CONSTANTS
# =============================================================================

# Address of the government ID issuer whose credentials back the name proof.
# The proof's second public input must equal this value.
GOV_ID_ISSUER_ADDRESS: str = (
    "0x03fae82f38bf01d9799d57fdda64fad4ac44e4c2c2f16c5bf8e1873d0a3e1993"
)

# Circuit whose verification key is fetched for name proofs
PROOF_CIRCUIT_NAME: str = "govIdFirstNameLastName"

# Minimum number of public inputs: root, issuer, first name, last name
PROOF_MIN_INPUTS: int = 4

# Credential types accepted from the registry (after normalization)
SUPPORTED_CREDENTIAL_TYPES: frozenset[str] = frozenset({"MD", "DO"})

# Slot layout of the credential leaf consumed by downstream verifiers
LEAF_FIELD_ORDER: tuple[str, ...] = (
    "issuer",
    "secret",
    "specialty",
    "derivedHash",
    "issuedAt",
    "scope",
)

# Roots contract addresses, keyed by network
ROOTS_CONTRACT_ADDRESSES: dict[str, str] = {
    "optimism": "0xb316940b687DAa87392157e2ECfeC1b9e182423d",
    "optimism-goerli": "0xa76C96acf9b95cC988d634F1fF52C9a2eF7a9371",
}

ALCHEMY_RPC_URLS: dict[str, str] = {
    "optimism": "https://opt-mainnet.g.alchemy.com/v2/{api_key}",
    "optimism-goerli": "https://opt-goerli.g.alchemy.com/v2/{api_key}",
}


# =============================================================================
# DEPLOYMENT ENVIRONMENT
# =============================================================================

ENVIRONMENT: str = os.getenv("MEDCRED_ENV", "production").lower()
IS_DEVELOPMENT: bool = ENVIRONMENT == "development"

# development talks to the testnet deployment of the Roots contract
CHAIN_NETWORK: str = "optimism-goerli" if IS_DEVELOPMENT else "optimism"
ROOTS_CONTRACT_ADDRESS: str = os.getenv(
    "MEDCRED_ROOTS_ADDRESS", ROOTS_CONTRACT_ADDRESSES[CHAIN_NETWORK]
)


def _get_rpc_url() -> Optional[str]:
    """Get the chain RPC URL.

    Priority:
    1. MEDCRED_RPC_URL - explicit endpoint
    2. MEDCRED_ALCHEMY_API_KEY - Alchemy endpoint for the selected network
    """
    if url := os.getenv("MEDCRED_RPC_URL"):
        return url

    api_key = os.getenv("MEDCRED_ALCHEMY_API_KEY")
    if api_key:
        return ALCHEMY_RPC_URLS[CHAIN_NETWORK].format(api_key=api_key)

    return None


RPC_URL: Optional[str] = _get_rpc_url()


# =============================================================================
# PERSISTENCE CONFIGURATION
# =============================================================================

def _get_data_dir() -> Path:
    """Determine data directory based on environment.

    Priority:
    1. MEDCRED_DATA_DIR env var (explicit override)
    2. /data/medcred-issuer if it exists (Docker volume mount)
    3. ~/.medcred-issuer (local development)
    4. /tmp/medcred-issuer (container fallback when home unavailable)
    """
    env_path = os.getenv("MEDCRED_DATA_DIR")
    if env_path:
        return Path(env_path)

    docker_path = Path("/data/medcred-issuer")
    if docker_path.exists():
        return docker_path

    try:
        home_path = Path.home() / ".medcred-issuer"
        home_path.mkdir(parents=True, exist_ok=True)
        return home_path
    except (OSError, PermissionError):
        return Path("/tmp/medcred-issuer")


DATA_DIR: Path = _get_data_dir()


def _get_database_url() -> str:
    """Get database URL from environment.

    Priority:
    1. MEDCRED_DATABASE_URL - explicit full connection string
    2. MEDCRED_POSTGRES_* - construct PostgreSQL URL from components
    3. SQLite fallback for local development
    """
    if url := os.getenv("MEDCRED_DATABASE_URL"):
        return url

    host = os.getenv("MEDCRED_POSTGRES_HOST")
    if host:
        user = os.getenv("MEDCRED_POSTGRES_USER", "medcred")
        password = os.getenv("MEDCRED_POSTGRES_PASSWORD", "")
        db = os.getenv("MEDCRED_POSTGRES_DB", "medcred")
        return f"postgresql+psycopg://{user}:{password}@{host}/{db}?sslmode=require"

    db_name = "medcred_issuer_dev.db" if IS_DEVELOPMENT else "medcred_issuer.db"
    return f"sqlite:///{DATA_DIR}/{db_name}"


DATABASE_URL: str = _get_database_url()


# =============================================================================
# CONFIGURABLE DEFAULTS
# =============================================================================

NPI_REGISTRY_URL: str = os.getenv(
    "MEDCRED_NPI_REGISTRY_URL", "https://npiregistry.cms.hhs.gov/api/"
)
NPI_REGISTRY_API_VERSION: str = "2.1"

VERIFICATION_KEY_URL: str = os.getenv(
    "MEDCRED_VERIFICATION_KEY_URL",
    f"https://preproc-zkp.s3.us-east-2.amazonaws.com/{PROOF_CIRCUIT_NAME}.verification.key",
)

# Sidecars wrapping the proof verifier and the credential signer
PROOF_VERIFIER_URL: str = os.getenv(
    "MEDCRED_PROOF_VERIFIER_URL", "http://127.0.0.1:3010/verify"
)
SIGNER_URL: str = os.getenv("MEDCRED_SIGNER_URL", "http://127.0.0.1:3011/issue")


def _get_http_timeout() -> Optional[float]:
    """Outbound HTTP timeout. Unset means no client-side timeout."""
    raw = os.getenv("MEDCRED_HTTP_TIMEOUT")
    if not raw:
        return None
    return float(raw)


HTTP_TIMEOUT_SECONDS: Optional[float] = _get_http_timeout()


# =============================================================================
# OPERATIONAL
# =============================================================================

ISSUER_SECRET_KEY: Optional[str] = os.getenv("MEDCRED_ISSUER_SECRET_KEY")
SERVICE_PORT: int = int(os.getenv("MEDCRED_PORT", "3007"))
SERVICE_HOST: str = os.getenv("MEDCRED_HOST", "0.0.0.0")


def validate_config() -> tuple[bool, Optional[str]]:
    """Validate the configuration required to serve traffic.

    Returns:
        Tuple of (is_valid, error_message). If is_valid is False,
        error_message names the missing settings.
    """
    missing = []
    if not ISSUER_SECRET_KEY:
        missing.append("MEDCRED_ISSUER_SECRET_KEY")
    if not RPC_URL:
        missing.append("MEDCRED_RPC_URL or MEDCRED_ALCHEMY_API_KEY")

    if missing:
        return False, f"Missing required config: {', '.join(missing)}"

    return True, None
