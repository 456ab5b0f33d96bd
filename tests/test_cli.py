import pytest

from drips_raffle.cli import _query_options, build_parser, cmd_nfts, cmd_raffles
from drips_raffle.models import StatusFilter


def test_raffles_defaults() -> None:
    args = build_parser().parse_args(["raffles"])

    assert args.func is cmd_raffles
    assert args.network is None
    assert args.timeout == 60.0
    options = _query_options(args)
    assert options.limit == 10
    assert options.cursor is None
    assert options.include_details
    assert options.status == StatusFilter.ALL


def test_query_flags() -> None:
    args = build_parser().parse_args(
        [
            "--network",
            "testnet",
            "creator",
            "0xabc",
            "--limit",
            "3",
            "--cursor",
            "0x1",
            "--status",
            "ended",
            "--no-details",
        ]
    )

    options = _query_options(args)
    assert args.address == "0xabc"
    assert options.limit == 3
    assert options.cursor == "0x1"
    assert options.status == StatusFilter.ENDED
    assert not options.include_details


def test_nfts_flags() -> None:
    args = build_parser().parse_args(["nfts", "0xowner", "--all", "--no-metadata"])

    assert args.func is cmd_nfts
    assert args.all
    assert args.no_metadata
    assert args.limit == 20


def test_subcommand_required() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_unknown_network_rejected() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--network", "localnet", "raffles"])


@pytest.mark.parametrize("command", [["raffles"], ["nfts", "0xowner"]])
@pytest.mark.parametrize("value", ["0", "-3", "ten"])
def test_limit_must_be_positive(command, value) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(command + ["--limit", value])
