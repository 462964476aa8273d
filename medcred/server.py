"""Run the issuer under uvicorn.

Usage:
    medcred-issuer
    uvicorn medcred.main:app --port 3007
"""
import uvicorn

from medcred.config import SERVICE_HOST, SERVICE_PORT


def main() -> None:
    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests
    uvicorn.run("medcred.main:app", host=SERVICE_HOST, port=SERVICE_PORT)


if __name__ == "__main__":
    main()
