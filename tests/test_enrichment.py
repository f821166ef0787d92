import copy
import json

from proposal_wizard.research.enrichment import changed_steps, enrich_step_data

BASELINE = {
    "brief": {"brandName": "Acme", "brandBrief": "short", "brandPainPoints": ["guess"]},
    "target_audience": {"targetGender": "", "targetAgeRange": "20-30", "targetInsights": []},
    "media_targets": {"budget": 50000, "potentialReach": 0, "potentialEngagement": 0, "cpe": 0},
}


def test_no_research_is_identity():
    data = copy.deepcopy(BASELINE)
    out = enrich_step_data(data)
    assert out == BASELINE
    assert out is not data
    assert enrich_step_data(data, None, None) == BASELINE
    assert enrich_step_data({}, None, None) == {}


def test_inputs_are_not_mutated(brand_research, influencer_strategy):
    data = copy.deepcopy(BASELINE)
    brand = copy.deepcopy(brand_research)
    strategy = copy.deepcopy(influencer_strategy)
    enrich_step_data(data, brand, strategy)
    assert data == BASELINE
    assert brand == brand_research
    assert strategy == influencer_strategy


def test_richer_wins_replaces_shorter_text(brand_research):
    out = enrich_step_data(BASELINE, brand_research)
    assert out["brief"]["brandBrief"] == brand_research["companyDescription"]


def test_richer_wins_keeps_longer_user_text():
    long_brief = "A very detailed brand background written by the account manager."
    data = {"brief": {"brandBrief": long_brief}}
    out = enrich_step_data(data, {"companyDescription": "Shoes."})
    assert out["brief"]["brandBrief"] == long_brief


def test_lists_are_overridden_by_research(brand_research):
    out = enrich_step_data(BASELINE, brand_research)
    assert out["brief"]["brandPainPoints"] == ["sore feet", "shoes that look orthopedic"]
    assert out["target_audience"]["targetInsights"] == ["fashion", "wellness"]


def test_empty_research_list_keeps_guess():
    brand = {"targetDemographics": {"primaryAudience": {"painPoints": []}}}
    out = enrich_step_data(BASELINE, brand)
    assert out["brief"]["brandPainPoints"] == ["guess"]


def test_fill_only_writes_blank_and_trivial_values(brand_research):
    out = enrich_step_data(BASELINE, brand_research)
    assert out["target_audience"]["targetGender"] == "נשים"
    assert out["target_audience"]["targetAgeRange"] == "25-45"


def test_fill_only_never_overwrites_user_content(brand_research):
    typed = "Mothers of toddlers living in the periphery"
    data = {"target_audience": {"targetDescription": typed}}
    out = enrich_step_data(data, brand_research)
    assert out["target_audience"]["targetDescription"] == typed


def test_influencer_rollups(influencer_strategy):
    out = enrich_step_data(BASELINE, None, influencer_strategy)
    assert out["quantities"]["influencerCount"] == 10
    mt = out["media_targets"]
    assert mt["potentialReach"] == 1_200_000
    assert mt["potentialEngagement"] == 45_000
    assert mt["cpe"] == 0.8
    assert mt["budget"] == 50000


def test_rollups_do_not_replace_existing_numbers(influencer_strategy):
    data = {"quantities": {"influencerCount": 3}, "media_targets": {"potentialReach": 500}}
    out = enrich_step_data(data, None, influencer_strategy)
    assert out["quantities"]["influencerCount"] == 3
    assert out["media_targets"]["potentialReach"] == 500


def test_strategy_and_influencer_fields(influencer_strategy):
    out = enrich_step_data({}, None, influencer_strategy)
    assert out["strategy"]["strategyHeadline"] == "Comfort, all day"
    assert out["strategy"]["strategyPillars"] == [
        {"title": "Day in my shoes", "description": "Follow a creator from morning to night"}
    ]
    assert out["influencers"]["influencerStrategy"] == influencer_strategy["strategySummary"]

    [profile] = out["influencers"]["influencers"]
    assert profile["username"] == "dana.walks"
    assert profile["followers"] == 120_000
    assert profile["engagementRate"] == 3.5
    assert profile["categories"] == ["lifestyle"]


def test_influencer_list_is_filled_only_when_empty(influencer_strategy):
    mine = [{"name": "Chosen by hand"}]
    out = enrich_step_data({"influencers": {"influencers": mine}}, None, influencer_strategy)
    assert out["influencers"]["influencers"] == mine


def test_research_slot_records_payloads(brand_research):
    out = enrich_step_data({}, brand_research)
    research = out["research"]
    assert research["researchEnabled"] is True
    assert research["researchPhase"] == "complete"
    assert research["brandResearch"] == brand_research
    assert "influencerStrategy" not in research


def test_enrichment_is_idempotent(brand_research, influencer_strategy):
    once = enrich_step_data(BASELINE, brand_research, influencer_strategy)
    twice = enrich_step_data(once, brand_research, influencer_strategy)
    assert twice == once


def test_odd_typed_payload_branches_are_skipped():
    brand = {"companyDescription": 42, "targetDemographics": "n/a"}
    strategy = {"tiers": "many", "expectedKPIs": [None, {"metric": 7}], "recommendations": [{}]}
    out = enrich_step_data(BASELINE, brand, strategy)
    assert out["brief"] == BASELINE["brief"]
    assert "quantities" not in out
    assert "influencers" not in out


def test_changed_steps(brand_research):
    out = enrich_step_data(BASELINE, brand_research)
    assert set(changed_steps(BASELINE, out)) == {"brief", "target_audience", "strategy", "research"}


def test_overflowing_tier_count_is_ignored():
    strategy = json.loads('{"tiers": [{"recommendedCount": 1e400}, {"recommendedCount": 3}]}')
    out = enrich_step_data({}, None, strategy)
    assert out["quantities"]["influencerCount"] == 3


def test_infinite_tier_total_adds_no_headcount():
    strategy = {"tiers": [{"recommendedCount": 1e308}, {"recommendedCount": 1e308}]}
    out = enrich_step_data({}, None, strategy)
    assert "quantities" not in out
