"""
ECIES Command-Line Tool

Genera chiavi secp256k1, cifra e decifra payload ECIES compatibili con eccrypto.

Usage:
    ecies-tool keygen
    ecies-tool pubkey --private-key <hex> [--compressed]
    ecies-tool encrypt --public-key <hex> --message "testo"
    ecies-tool encrypt --public-key <hex> --hex 00ff...
    ecies-tool decrypt --private-key <hex> --payload <hex> [--raw]
    ecies-tool --backend software --verbose decrypt ...

Exit codes:
    0  success
    1  ECIES error (invalid key, MAC mismatch, malformed payload, ...)
    2  usage error

Author: ECIES Core Project
Date: October 2026
"""

import argparse
import json
import sys
from typing import List, Optional

from config.ecies_config import load_settings
from protocols.backends import available_backends
from protocols.ecies import CURVE, ECIESError, InvalidKeyError, create_engine, generate_private_key
from services.wallet_key_service import WalletKeyEncryptionService, process_wallet_private_key
from utils.encoding import from_hex, to_hex
from utils.logger import ECIESLogger
from utils.zeroize import wipe_all

EXIT_OK = 0
EXIT_ECIES_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecies-tool",
        description="ECIES secp256k1 (eccrypto-compatible) encryption tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--backend",
        choices=available_backends(),
        help="Backend crittografico (default: ECIES_BACKEND o native)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log a livello DEBUG su stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("keygen", help="Genera una nuova coppia di chiavi")

    pubkey = subparsers.add_parser("pubkey", help="Deriva la chiave pubblica")
    pubkey.add_argument("--private-key", required=True, help="Chiave privata (hex, 32 byte)")
    pubkey.add_argument("--compressed", action="store_true", help="Formato compresso (33 byte)")

    encrypt = subparsers.add_parser("encrypt", help="Cifra un messaggio")
    encrypt.add_argument("--public-key", required=True, help="Chiave pubblica destinatario (hex)")
    message = encrypt.add_mutually_exclusive_group(required=True)
    message.add_argument("--message", help="Messaggio di testo (UTF-8)")
    message.add_argument("--hex", dest="hex_message", help="Messaggio binario (hex)")

    decrypt = subparsers.add_parser("decrypt", help="Decifra un payload")
    decrypt.add_argument("--private-key", required=True, help="Chiave privata (hex, 32 byte)")
    decrypt.add_argument("--payload", required=True, help="Payload cifrato (hex)")
    decrypt.add_argument("--raw", action="store_true", help="Stampa il plaintext in hex")

    return parser


def _keygen(engine) -> str:
    backend = engine.backend
    secret = generate_private_key(backend)
    try:
        private_key = bytes(secret)
        return json.dumps(
            {
                "private_key": to_hex(private_key),
                "public_key": to_hex(backend.derive_public_key(private_key, compressed=False)),
                "compressed_public_key": to_hex(backend.derive_public_key(private_key, compressed=True)),
            },
            indent=2,
        )
    finally:
        wipe_all(secret)


def _pubkey(engine, args) -> str:
    private_key = process_wallet_private_key(args.private_key)
    if len(private_key) != CURVE.PRIVATE_KEY_LENGTH or not engine.backend.is_valid_private_key(private_key):
        raise InvalidKeyError("Invalid private key")
    return to_hex(engine.backend.derive_public_key(private_key, compressed=args.compressed))


def _encrypt(service, args, parser) -> str:
    if args.message is not None:
        return service.encrypt_with_wallet_public_key(args.message, args.public_key)
    try:
        message = from_hex(args.hex_message)
    except ValueError as e:
        parser.error(f"--hex: {e}")
    return service.engine.serialize(service.encrypt_binary(message, args.public_key))


def _decrypt(service, args) -> str:
    if args.raw:
        payload = service.engine.deserialize(args.payload)
        return to_hex(service.decrypt_binary(payload, args.private_key))
    return service.decrypt_with_wallet_private_key(args.payload, args.private_key)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        engine = create_engine(args.backend or settings.backend, settings=settings)
    except ValueError as e:
        parser.error(str(e))

    service = WalletKeyEncryptionService(engine)
    logger = ECIESLogger.get_logger("ecies-tool", log_dir=settings.log_dir, level=settings.log_level)
    if args.verbose:
        for name in ("ecies-tool", "ECIESEngine", "WalletKeyService"):
            ECIESLogger.set_level(name, "DEBUG")

    logger.debug(f"Command {args.command} with backend={engine.backend.name}")

    try:
        if args.command == "keygen":
            output = _keygen(engine)
        elif args.command == "pubkey":
            output = _pubkey(engine, args)
        elif args.command == "encrypt":
            output = _encrypt(service, args, parser)
        else:
            output = _decrypt(service, args)
    except ECIESError as e:
        print(f"Error [{e.code.value}]: {e.message}", file=sys.stderr)
        return EXIT_ECIES_ERROR

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
