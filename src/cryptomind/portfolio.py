"""
Portfolio analytics for the dashboard: totals, chart segments and
DeFi opportunity suggestions
"""

from typing import List

from .constants import CHART_COLORS, RECOMMENDATION_MIN_BALANCES
from .models import (
    ChartDataPoint, PortfolioSummary, Recommendation, RecommendationType, Token
)


# Static staking / lending opportunities
DEFI_RECOMMENDATIONS = [
    Recommendation(
        id='lido-steth',
        protocol='Lido Finance',
        asset='ETH',
        type=RecommendationType.STAKING,
        apy=4.2,
        min_amount='0.01 ETH',
        risk_level='Low',
        description=('Stake your ETH with Lido and earn stETH, which automatically accrues '
                     'staking rewards. The most liquid ETH staking solution with no lock-up period.'),
        url='https://lido.fi',
        tags=['Liquid Staking', 'No Lock-up', 'DeFi Blue Chip'],
    ),
    Recommendation(
        id='aave-usdc',
        protocol='Aave v3',
        asset='USDC',
        type=RecommendationType.LENDING,
        apy=5.1,
        min_amount='100 USDC',
        risk_level='Low',
        description=("Deposit USDC into Aave's lending pool and earn interest from borrowers. "
                     "One of the most battle-tested DeFi protocols with $10B+ TVL."),
        url='https://aave.com',
        tags=['Stablecoin', 'Battle-tested', 'High Liquidity'],
    ),
    Recommendation(
        id='eigenlayer-eth',
        protocol='EigenLayer',
        asset='ETH',
        type=RecommendationType.STAKING,
        apy=6.8,
        min_amount='0.1 ETH',
        risk_level='Medium',
        description=('Restake your ETH to secure multiple protocols simultaneously via EigenLayer '
                     'and earn additional rewards on top of standard staking yields.'),
        url='https://eigenlayer.xyz',
        tags=['Restaking', 'Points', 'Emerging'],
    ),
    Recommendation(
        id='compound-dai',
        protocol='Compound v3',
        asset='DAI',
        type=RecommendationType.LENDING,
        apy=4.8,
        min_amount='50 DAI',
        risk_level='Low',
        description=('Supply DAI to Compound to earn steady interest. Compound is one of the '
                     'original DeFi lending protocols with a proven track record since 2018.'),
        url='https://compound.finance',
        tags=['Stablecoin', 'OG DeFi', 'COMP Rewards'],
    ),
    Recommendation(
        id='uniswap-eth-usdc',
        protocol='Uniswap v3',
        asset='ETH/USDC',
        type=RecommendationType.LIQUIDITY,
        apy=12.5,
        min_amount='$500 equivalent',
        risk_level='High',
        description=('Provide liquidity to the ETH/USDC pool on Uniswap v3. Earn trading fees but '
                     'be aware of impermanent loss risk in volatile market conditions.'),
        url='https://app.uniswap.org',
        tags=['LP Fees', 'Impermanent Loss', 'Active Management'],
    ),
    Recommendation(
        id='rocketpool-reth',
        protocol='Rocket Pool',
        asset='ETH',
        type=RecommendationType.STAKING,
        apy=3.9,
        min_amount='0.01 ETH',
        risk_level='Low',
        description=("Mint rETH by depositing ETH with Rocket Pool's decentralized staking network. "
                     "More decentralized than Lido with no single points of failure."),
        url='https://rocketpool.net',
        tags=['Decentralized', 'rETH', 'No KYC'],
    ),
]

# Which holding unlocks each recommendation asset
_RECOMMENDATION_REQUIREMENTS = {
    'ETH': 'ETH',
    'ETH/USDC': 'ETH',
    'USDC': 'USDC',
    'DAI': 'DAI',
}


def weighted_change_24h(tokens: List[Token]) -> float:
    """USD-value weighted average of the tokens' 24h price change"""
    total = sum(t.usd_value for t in tokens)
    if total <= 0:
        return 0.0
    return sum(t.price_change_24h * t.usd_value / total for t in tokens)


def summarize_portfolio(tokens: List[Token]) -> PortfolioSummary:
    total = sum(t.usd_value for t in tokens)
    top = max(tokens, key=lambda t: t.usd_value, default=None)
    top_percent = (top.usd_value / total * 100) if top and total > 0 else 0.0
    return PortfolioSummary(
        total_usd_value=total,
        change_24h_percent=weighted_change_24h(tokens),
        top_holding=top.symbol if top else 'N/A',
        top_holding_percent=top_percent,
        token_count=len(tokens),
    )


def generate_chart_data(tokens: List[Token]) -> List[ChartDataPoint]:
    """Allocation segments for the pie chart, largest first"""
    total = sum(t.usd_value for t in tokens)
    if total == 0:
        return []

    held = sorted((t for t in tokens if t.usd_value > 0),
                  key=lambda t: t.usd_value, reverse=True)
    return [
        ChartDataPoint(
            name=token.symbol,
            value=token.usd_value,
            color=CHART_COLORS[i % len(CHART_COLORS)],
            percent=token.usd_value / total * 100,
        )
        for i, token in enumerate(held)
    ]


def relevant_recommendations(tokens: List[Token]) -> List[Recommendation]:
    """
    Filter the opportunity list down to assets the wallet actually holds.

    With no holdings, or when nothing qualifies, the full list is returned.
    """
    if not tokens:
        return list(DEFI_RECOMMENDATIONS)

    held = {
        symbol for symbol, minimum in RECOMMENDATION_MIN_BALANCES.items()
        if any(t.symbol == symbol and t.balance_amount > minimum for t in tokens)
    }

    filtered = [
        rec for rec in DEFI_RECOMMENDATIONS
        if rec.asset not in _RECOMMENDATION_REQUIREMENTS
        or _RECOMMENDATION_REQUIREMENTS[rec.asset] in held
    ]
    return filtered or list(DEFI_RECOMMENDATIONS)
