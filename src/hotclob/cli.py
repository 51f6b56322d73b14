"""
hotclob CLI 入口

用法:
    hotclob derive-key                                  # 创建或派生 API 凭证
    hotclob sign  --token-id ID --side buy --price 0.55 --size 10   # 只签名, 打印请求体
    hotclob place --token-id ID --side buy --price 0.55 --size 10   # 签名并提交
"""

import argparse
import asyncio
import json
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from hotclob.connection import HotPathClient
from hotclob.core.config import Config, load_config
from hotclob.core.exceptions import HotClobError
from hotclob.order.types import LimitOrderOverrides, LimitOrderRequest, OrderType, Side, TickSize

logger = logging.getLogger(__name__)


def setup_logging(config: Config, debug: bool = False):
    level = logging.DEBUG if debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.log_format)


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid decimal: {value}")


def _request_from_args(args) -> LimitOrderRequest:
    expiration = None
    if args.expiration:
        expiration = datetime.fromtimestamp(args.expiration, tz=timezone.utc)
    return LimitOrderRequest(
        token_id=args.token_id,
        side=Side(args.side.upper()),
        price=args.price,
        size=args.size,
        nonce=args.nonce,
        expiration=expiration,
        taker=args.taker,
        order_type=OrderType(args.order_type.upper()) if args.order_type else None,
        post_only=args.post_only,
    )


def _overrides_from_args(args) -> LimitOrderOverrides:
    return LimitOrderOverrides(
        tick_size=TickSize.parse(args.tick_size) if args.tick_size else None,
        neg_risk=True if args.neg_risk else None,
        fee_rate_bps=args.fee_rate_bps,
    )


async def _open_client(config: Config) -> HotPathClient:
    hotpath_config = config.to_hotpath_config()
    if config.credentials is not None:
        return HotPathClient.with_credentials(hotpath_config, config.credentials)
    return await HotPathClient.bootstrap(hotpath_config)


async def cmd_derive_key(config: Config, args):
    """创建或派生 API 凭证"""
    hotpath_config = config.to_hotpath_config()
    async with await HotPathClient.bootstrap(hotpath_config) as client:
        creds = client.credentials
        print(json.dumps({
            "address": client.address,
            "apiKey": creds.key,
            "secret": creds.secret,
            "passphrase": creds.passphrase,
        }, indent=2))


async def cmd_sign(config: Config, args):
    """签名但不提交"""
    async with await _open_client(config) as client:
        signed = await client.sign_limit_order(_request_from_args(args), _overrides_from_args(args))
        print(json.dumps(signed.to_dict(), indent=2))


async def cmd_place(config: Config, args):
    """签名并提交"""
    async with await _open_client(config) as client:
        response = await client.post_limit_order(_request_from_args(args), _overrides_from_args(args))
        print(json.dumps({
            "success": response.success,
            "orderID": response.order_id,
            "status": response.status,
            "errorMsg": response.error_msg,
        }, indent=2))


def _add_order_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--token-id", type=int, required=True, help="Outcome token id")
    parser.add_argument("--side", choices=["buy", "sell"], required=True)
    parser.add_argument("--price", type=_decimal, required=True)
    parser.add_argument("--size", type=_decimal, required=True)
    parser.add_argument("--order-type", choices=["gtc", "gtd", "fok", "fak"])
    parser.add_argument("--expiration", type=int, help="Unix seconds (GTD only)")
    parser.add_argument("--nonce", type=int)
    parser.add_argument("--taker", help="Taker address (default: public order)")
    parser.add_argument("--post-only", action="store_true", default=None)
    parser.add_argument("--tick-size", help="Override tick size (0.1|0.01|0.001|0.0001)")
    parser.add_argument("--neg-risk", action="store_true", help="Use the neg-risk exchange")
    parser.add_argument("--fee-rate-bps", type=int)


def _add_credential_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--api-key", help="Existing API key; together with --api-secret and --api-passphrase skips bootstrap")
    parser.add_argument("--api-secret")
    parser.add_argument("--api-passphrase")


def apply_credential_args(config: Config, args) -> None:
    """命令行凭证覆盖配置文件/环境变量"""
    if getattr(args, "api_key", None):
        config.api_key = args.api_key
    if getattr(args, "api_secret", None):
        config.api_secret = args.api_secret
    if getattr(args, "api_passphrase", None):
        config.api_passphrase = args.api_passphrase


def main():
    parser = argparse.ArgumentParser(description="hotclob - Polymarket CLOB limit order hot path")
    parser.add_argument("-c", "--config", help="Path to YAML config")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("derive-key", help="Create or derive API credentials")

    sign_parser = subparsers.add_parser("sign", help="Build and sign a limit order without submitting")
    _add_order_args(sign_parser)
    _add_credential_args(sign_parser)

    place_parser = subparsers.add_parser("place", help="Sign and submit a limit order")
    _add_order_args(place_parser)
    _add_credential_args(place_parser)

    args = parser.parse_args()
    config = load_config(args.config)
    apply_credential_args(config, args)
    setup_logging(config, args.debug)

    commands = {
        "derive-key": cmd_derive_key,
        "sign": cmd_sign,
        "place": cmd_place,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        asyncio.run(command(config, args))
    except HotClobError as e:
        logger.error(f"{e.kind.value} error: {e.message}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
