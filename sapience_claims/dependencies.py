from sapience_claims.config import Settings, settings
from sapience_claims.markets.settlement import SettlementReader, settlement_reader
from sapience_claims.markets.submitter import BaseSubmitter, web3_submitter


def get_settings() -> Settings:
    return settings


def get_settlement_reader() -> SettlementReader:
    return settlement_reader


def get_submitter() -> BaseSubmitter:
    return web3_submitter
