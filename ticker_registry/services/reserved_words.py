"""Static list of tickers that can never be registered."""
from typing import FrozenSet, Iterable


RESERVED_TICKERS = [
    # Currencies and chains
    'SOL', 'BTC', 'ETH', 'USDC', 'USDT', 'LOS', 'LOL', '404',
    # Platform and market jargon
    'NFT', 'DAO', 'DEFI', 'WEB3', 'GAME', 'ART', 'META', 'AI', 'VR', 'AR',
    'PFP', 'AVATAR', 'COLLECTIBLE', 'TRADING', 'CARD', 'TOKEN', 'COIN',
    'CRYPTO', 'BLOCKCHAIN', 'SMART', 'CONTRACT', 'DAPP', 'PLATFORM',
    'MARKETPLACE', 'AUCTION', 'BID', 'SELL', 'BUY', 'TRADE', 'SWAP',
    'BRIDGE', 'STAKING', 'YIELD', 'FARMING', 'LIQUIDITY', 'POOL', 'VAULT',
    'STRATEGY', 'PROTOCOL', 'GOVERNANCE', 'VOTE', 'PROPOSAL', 'TREASURY',
    'FUND', 'GRANT', 'BOUNTY', 'REWARD', 'INCENTIVE', 'BONUS', 'AIRDROP',
    'CLAIM', 'VERIFY', 'KYC', 'AML', 'COMPLIANCE', 'SECURITY', 'AUDIT',
    # Lifecycle words
    'TEST', 'DEMO', 'BETA', 'ALPHA', 'MAINNET', 'TESTNET', 'DEV',
    'STAGING', 'PRODUCTION', 'LIVE', 'OFFLINE', 'MAINTENANCE',
    'UPGRADE', 'MIGRATION', 'DEPRECATED', 'LEGACY', 'OLD', 'NEW'
]


class ReservedWordList:
    """Immutable set of disallowed tickers, compared on the normalized form."""

    def __init__(self, words: Iterable[str] = RESERVED_TICKERS):
        self._words: FrozenSet[str] = frozenset(w.upper().strip() for w in words)

    def is_reserved(self, symbol: str) -> bool:
        return symbol.upper().strip() in self._words

    def __contains__(self, symbol: str) -> bool:
        return self.is_reserved(symbol)

    def __len__(self) -> int:
        return len(self._words)
