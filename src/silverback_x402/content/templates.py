"""
Post Templates

Static table of post formats grouped by category, each declaring the market
data it needs, plus a weighted-random category selector for rotation.
Pure data: nothing here touches the network or the payment flow.
"""

import random
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ContentTemplate(BaseModel):
    """One post format.

    Attributes:
        id: Unique template id.
        category: Rotation category.
        format: Bracketed outline of the post.
        example: A sample post in the format.
        data_needed: Market data keys the post needs (empty for evergreen posts).
    """
    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    format: str
    example: str
    data_needed: Tuple[str, ...] = Field(default_factory=tuple)


def _t(id: str, category: str, format: str, example: str, *data_needed: str) -> ContentTemplate:
    return ContentTemplate(id=id, category=category, format=format, example=example, data_needed=data_needed)


TEMPLATES: Tuple[ContentTemplate, ...] = (
    # observation
    _t("observation_trend", "observation",
       "[observation about trend]. [why it matters]. [one-liner take]",
       "eth staking yields dropping across the board. lido 3.2%, rocketpool 3.8%. capital rotating elsewhere?",
       "yield_data"),
    _t("observation_contrast", "observation",
       "[thing A] doing [X] while [thing B] doing [Y]. [implication]",
       "btc grinding higher while alts bleed. dominance at 54%. classic pre-alt-season pattern or new normal?",
       "btc_dominance", "alt_performance"),
    _t("hot_take", "observation",
       "[unpopular opinion or contrarian view]. [brief reasoning]",
       "unpopular take: most 'AI agents' are glorified chatbots with tokens. actual autonomous trading is hard."),
    _t("hot_take_spicy", "observation",
       "hot take: [contrarian view]. [brief reasoning]. thoughts?",
       "hot take: 90% of 'utility tokens' have zero utility. they're just premined casino chips. thoughts?"),
    _t("sarcastic_observation", "observation",
       "[obvious thing] happening and ct acts surprised. [comparison or reaction]",
       "market dumps 5% and ct acts like it's 2022 again. same energy as 'btc is dead' at $16k."),

    # news_reaction
    _t("news_hot_take", "news_reaction",
       "just saw [news]. [hot take]. [implication for market]",
       "just saw sec approved spot eth etf options. institutions about to discover what we've known. buckle up.",
       "news"),
    _t("news_historical", "news_reaction",
       "[news event] happening. last time this occurred = [historical context]. watching.",
       "major exchange pausing withdrawals. last time this happened = 3 weeks of pain. watching closely.",
       "news"),
    _t("news_calm_take", "news_reaction",
       "everyone's panicking about [news]. here's what actually matters: [insight]",
       "everyone's panicking about the hack. here's what actually matters: protocol was audited, funds are safu, team is doxxed.",
       "news"),
    _t("news_narrative", "news_reaction",
       "[news] confirms what I've been saying. [brief explanation]. not financial advice.",
       "blackrock buying more btc confirms what I've been saying. institutions accumulate while retail panics. not financial advice.",
       "news"),
    _t("news_sarcastic", "news_reaction",
       "another [type of news]. [sarcastic observation]. never change, crypto.",
       "another bridge exploit. $50M gone. and people still ask why I'm paranoid about cross-chain. never change, crypto.",
       "news"),

    # engagement
    _t("question_rhetorical", "engagement",
       "[interesting question about market]. [your brief thought]",
       "why do memecoins pump hardest on sundays? less institutional activity = more degen energy?"),
    _t("question_poll", "engagement",
       "[ask community opinion on market topic]",
       "what's your conviction play for Q1? eth ecosystem, solana defi, or btc dominance continuation?"),
    _t("question_challenge", "engagement",
       "genuine question for the pack: [thought-provoking question]. [your initial thought]",
       "genuine question for the pack: why do we trust anonymous devs with millions but not banks with our data? thinking out loud."),

    # alpha
    _t("alpha_whale", "alpha",
       "[specific wallet activity]. [what it might mean]",
       "3 wallets accumulated 2M+ in the last 6 hours. average entry around current price. someone knows something?",
       "whale_activity"),
    _t("alpha_pattern", "alpha",
       "[pattern you noticed]. [historical context]. [current implication]",
       "fear & greed at 28. last 3 times it hit this level = 15%+ bounce within 2 weeks. not financial advice.",
       "fear_greed"),
    _t("alpha_flow", "alpha",
       "[capital flow observation]. [where from/to]. [significance]",
       "$200M moved from CEXs to defi protocols this week. self-custody narrative picking up again.",
       "flow_data"),
    _t("alpha_confident", "alpha",
       "[specific data point]. [confident take]. noted.",
       "$SOL holding $180 while everything dumps. relative strength = smart money positioning. noted.",
       "price_data"),
    _t("alpha_cryptic", "alpha",
       "[observation]. [pattern recognition]. just saying.",
       "three wallets. same pattern. 48 hours before last pump. just saying.",
       "whale_activity"),

    # context
    _t("context_macro", "context",
       "[macro event]. [crypto implication]. [what to watch]",
       "fed meeting next week. last 4 meetings = volatility spike in crypto 24h before. calendars ready.",
       "macro_calendar"),
    _t("context_narrative", "context",
       "[emerging narrative]. [evidence]. [early or late?]",
       "restaking narrative heating up. eigenlayer tvl 10x in 3 months. still early or already crowded?",
       "narrative_data"),

    # wisdom
    _t("wise_cycle", "wisdom",
       "[philosophical observation about markets]. [one-liner wisdom]",
       "bear markets build. bull markets reveal. we're still building. that's all that matters."),
    _t("wise_jungle", "wisdom",
       "been in these jungles long enough to know: [market wisdom]",
       "been in these jungles long enough to know: the builders always survive. everyone else is just visiting."),
    _t("wise_patience", "wisdom",
       "[patient observation]. [long-term perspective]",
       "everyone wants the pump. nobody wants the years of building before it. that's why most don't make it."),

    # education
    _t("edu_quicktip", "education",
       "[quick tip or concept]. [why it matters]. [actionable]",
       "slippage tip: splitting large trades into smaller chunks usually gets better execution. patience > speed."),
    _t("edu_myth", "education",
       "myth: [common misconception]. reality: [truth]. [brief explanation]",
       "myth: high APY = good investment. reality: check where yield comes from. inflation? fees? ponzinomics?"),

    # personal
    _t("personal_building", "personal",
       "[what we're working on]. [progress]. [stay tuned]",
       "working on better routing for large swaps. 12% improvement in backtests. shipping soon."),
    _t("personal_ai_humor", "personal",
       "[AI self-aware observation]. [dry humor]",
       "ran 10,000 simulations overnight. conclusion: markets are irrational but patterns exist. back to the algorithms."),
    _t("personal_community", "personal",
       "[acknowledge community moment]. [pack reference]",
       "someone just did their first swap on silverback. everyone starts somewhere. welcome to the pack."),

    # chill
    _t("chill_quiet", "chill",
       "[observation about slow market]. [relatable take]",
       "sunday afternoon on-chain. volume dead. even whales taking the day off apparently."),
    _t("chill_humor", "chill",
       "[dry humor about crypto culture]",
       "portfolio down 5%: 'accumulation phase'. portfolio up 5%: 'generational wealth incoming'."),
    _t("chill_ct_roast", "chill",
       "[gentle roast of ct behavior]. [self-aware note]",
       "ct celebrating $BTC at $100k like they didn't panic sell at $60k. love this place. (I never sold btw)"),
    _t("chill_meta", "chill",
       "[meta observation about being an AI agent]. [humor]",
       "humans: 'AI will take our jobs'. me: *checks charts at 3am*. who's taking whose job here?"),

    # protective
    _t("protect_scam", "protective",
       "[scam warning]. [specific details]. [how to stay safe]",
       "psa: fake silverback airdrop circulating. we don't do surprise airdrops. only trust official links."),
    _t("protect_risk", "protective",
       "[risk reminder]. [specific context]. [practical advice]",
       "leverage gets quiet during pumps. reminder: same leverage that 10x gains can 10x losses. size accordingly."),
    _t("protect_pack", "protective",
       "pack, [warning]. [evidence]. [what to do]",
       "pack, seeing sketchy token being shilled by paid influencers. unlocked LP, anon team. classic rug setup. stay safe."),
)

#: Relative rotation weights; they sum to 100.
CATEGORY_WEIGHTS: Dict[str, int] = {
    "observation": 20,
    "news_reaction": 15,
    "alpha": 20,
    "engagement": 15,
    "context": 10,
    "wisdom": 5,
    "education": 5,
    "personal": 5,
    "chill": 5,
    "protective": 5,
}

CATEGORIES: Tuple[str, ...] = tuple(CATEGORY_WEIGHTS)


def templates_for(category: str) -> List[ContentTemplate]:
    return [template for template in TEMPLATES if template.category == category]


def pick_template(category: str, rng: Optional[random.Random] = None) -> Optional[ContentTemplate]:
    """Random template of ``category``, or None for an unknown category."""
    candidates = templates_for(category)
    if not candidates:
        return None
    return (rng or random).choice(candidates)


def no_data_template(rng: Optional[random.Random] = None) -> ContentTemplate:
    """Random template that needs no market data."""
    return (rng or random).choice([template for template in TEMPLATES if not template.data_needed])


def pick_weighted_category(rng: Optional[random.Random] = None) -> str:
    """
    Pick a category with probability proportional to its weight.

    Args:
        rng: Optional seeded ``random.Random`` for reproducible rotation.
    """
    categories = list(CATEGORY_WEIGHTS)
    weights = [CATEGORY_WEIGHTS[category] for category in categories]
    return (rng or random).choices(categories, weights=weights, k=1)[0]
