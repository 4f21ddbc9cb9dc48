"""Systems: parliament, judiciary, economy, cabinet, society, elections, capital."""
from .economy import (
    EconomyResult,
    calculate_regional_economy,
    generate_industries,
    generate_regions,
    run_economy_tick,
    sign_trade_agreement,
    subsidize_industry,
    tax_industry,
    update_budget_allocation,
)
from .elections import (
    calculate_election_results,
    handle_election_if_needed,
    hold_election,
    hold_rally,
    is_campaign_turn,
    launch_smear_campaign,
    update_campaign,
)
from .judiciary import (
    appoint_judge,
    check_constitutionality,
    force_retirement,
    generate_judge,
    pack_court,
    update_constitution,
)
from .legislation import pass_bill, propose_bill, vote_on_bill
from .mandates import assign_strategy, execute_mandates, toggle_manual_override
from .minister_events import (
    apply_resignation,
    apply_scandal,
    check_minister_resignations,
    check_minister_scandals,
)
from .ministers import generate_minister, generate_minister_candidates
from .parliament import (
    NegotiationOffer,
    calculate_faction_base_support,
    calculate_government_support,
    generate_factions_for_party,
    generate_parliament,
    negotiate,
    negotiate_with_faction,
    simulate_bill_vote,
    update_faction_stances,
)
from .parliament_events import check_parliamentary_events, resolve_parliamentary_event
from .political_capital import (
    POLITICAL_COSTS,
    fire_minister,
    regen_political_capital,
    spend_political_capital,
)
from .psychology import evaluate_minister_behavior, update_rivalries
from .social import (
    calculate_class_struggle,
    check_for_protests,
    generate_pops,
    resolve_protest,
    run_protests,
    update_pop_satisfaction,
    update_protests,
)

__all__ = [
    "EconomyResult",
    "calculate_regional_economy",
    "generate_industries",
    "generate_regions",
    "run_economy_tick",
    "sign_trade_agreement",
    "subsidize_industry",
    "tax_industry",
    "update_budget_allocation",
    "calculate_election_results",
    "handle_election_if_needed",
    "hold_election",
    "hold_rally",
    "is_campaign_turn",
    "launch_smear_campaign",
    "update_campaign",
    "appoint_judge",
    "check_constitutionality",
    "force_retirement",
    "generate_judge",
    "pack_court",
    "update_constitution",
    "pass_bill",
    "propose_bill",
    "vote_on_bill",
    "assign_strategy",
    "execute_mandates",
    "toggle_manual_override",
    "apply_resignation",
    "apply_scandal",
    "check_minister_resignations",
    "check_minister_scandals",
    "generate_minister",
    "generate_minister_candidates",
    "NegotiationOffer",
    "calculate_faction_base_support",
    "calculate_government_support",
    "generate_factions_for_party",
    "generate_parliament",
    "negotiate",
    "negotiate_with_faction",
    "simulate_bill_vote",
    "update_faction_stances",
    "check_parliamentary_events",
    "resolve_parliamentary_event",
    "POLITICAL_COSTS",
    "fire_minister",
    "regen_political_capital",
    "spend_political_capital",
    "evaluate_minister_behavior",
    "update_rivalries",
    "calculate_class_struggle",
    "check_for_protests",
    "generate_pops",
    "resolve_protest",
    "run_protests",
    "update_pop_satisfaction",
    "update_protests",
]
