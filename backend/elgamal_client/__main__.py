import argparse
import logging
import os

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="ElGamal exchange client")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--service-url", type=str, default=None, help="Base URL of the encryption service")
    parser.add_argument("--rounds", type=int, default=None, help="Number of rounds to run")
    parser.add_argument("--log-level", type=str, default="info", help="Logging level")
    parser.add_argument("--stub", action="store_true", help="Run the stub encryption service instead")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Settings are read from the environment when the app builds its client.
    if args.service_url:
        os.environ["ELGAMAL_SERVICE_URL"] = args.service_url
    if args.rounds is not None:
        os.environ["ELGAMAL_TOTAL_ROUNDS"] = str(args.rounds)

    target = "elgamal_client.stub_service:app" if args.stub else "elgamal_client.main:app"
    uvicorn.run(target, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
