"""Stage gate checklist template shared by every site."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChecklistTemplateItem:
    key: str
    name: str
    kill_trigger: str | None = None


@dataclass(frozen=True)
class ChecklistStageTemplate:
    stage: int
    name: str
    items: tuple[ChecklistTemplateItem, ...]


def _item(key: str, name: str, kill_trigger: str | None = None) -> ChecklistTemplateItem:
    return ChecklistTemplateItem(key=key, name=name, kill_trigger=kill_trigger)


STAGE_CHECKLISTS: tuple[ChecklistStageTemplate, ...] = (
    ChecklistStageTemplate(1, "Site Identification", (
        _item("site_identified", "Site identified and initial screening complete"),
        _item("ownership_confirmed", "Ownership confirmed via title search"),
        _item("option_executed", "Option agreement or LOI executed",
              "Unable to secure site control: kill deal"),
        _item("site_visit", "Initial site visit completed"),
        _item("gate_decision", "Stage 1 gate decision: GO/NO-GO"),
    )),
    ChecklistStageTemplate(2, "Gas Confirmation", (
        _item("gas_pipeline_identified", "Nearest gas transmission pipeline identified"),
        _item("gas_utility_contacted", "Gas utility contacted",
              "Utility unresponsive or hostile: consider kill"),
        _item("gas_feasibility", "Gas feasibility study ordered"),
        _item("gas_capacity_confirmed", "Gas capacity confirmed",
              "Insufficient gas capacity: kill unless alternative identified"),
        _item("gas_cost_estimate", "Gas lateral cost estimate received"),
        _item("gate_decision", "Stage 2 gate decision: GO/NO-GO"),
    )),
    ChecklistStageTemplate(3, "Power Secured", (
        _item("transmission_identified", "Nearest transmission line identified"),
        _item("substation_capacity", "Substation capacity confirmed"),
        _item("interconnection_filed", "Interconnection application filed"),
        _item("interconnection_study", "Interconnection study complete",
              "Interconnection costs exceed $5M: evaluate economics"),
        _item("power_agreement", "Power purchase/interconnection agreement signed"),
        _item("phase_i_ordered", "Phase I ESA ordered"),
        _item("phase_i_complete", "Phase I ESA complete",
              "Phase I flagged RECs: evaluate remediation cost, kill if scope over $2M is uncertain"),
        _item("gate_decision", "Stage 3 gate decision: GO/NO-GO"),
    )),
    ChecklistStageTemplate(4, "Permits Filed", (
        _item("air_permit_type", "Air permit type determined"),
        _item("air_consultant_engaged", "Air permit consultant engaged"),
        _item("air_application_filed", "Air permit application filed"),
        _item("zoning_confirmed", "Zoning confirmed or variance filed",
              "Zoning variance denied: kill deal"),
        _item("water_confirmed", "Water capacity confirmed"),
        _item("cba_negotiated", "Community benefit agreement negotiated"),
        _item("gate_decision", "Stage 4 gate decision: GO/NO-GO"),
    )),
    ChecklistStageTemplate(5, "De-risked", (
        _item("air_permit_issued", "Air permit issued",
              "Air permit denied or major conditions: evaluate alternatives"),
        _item("all_permits_secured", "All required permits secured"),
        _item("incentives_secured", "Municipal incentives formalized"),
        _item("engineering_complete", "Site engineering/design complete"),
        _item("gate_decision", "Stage 5 gate decision: GO/NO-GO"),
    )),
    ChecklistStageTemplate(6, "Marketing", (
        _item("marketing_package", "Marketing package prepared"),
        _item("buyers_contacted", "Target buyers contacted"),
        _item("site_tours", "Site tours completed"),
        _item("loi_received", "LOI(s) received"),
        _item("buyer_selected", "Buyer selected"),
        _item("psa_executed", "Purchase agreement executed"),
    )),
    ChecklistStageTemplate(7, "Closing", (
        _item("due_diligence", "Buyer due diligence complete"),
        _item("closing_docs", "Closing documents prepared"),
        _item("funds_escrowed", "Funds escrowed"),
        _item("title_transferred", "Title transferred"),
        _item("deal_closed", "Deal closed"),
    )),
)

TOTAL_ITEMS = sum(len(stage.items) for stage in STAGE_CHECKLISTS)


def get_stage(stage: int) -> ChecklistStageTemplate:
    for template in STAGE_CHECKLISTS:
        if template.stage == stage:
            return template
    raise LookupError(f"Checklist stage {stage} not found")


def get_item(stage: int, key: str) -> ChecklistTemplateItem:
    for item in get_stage(stage).items:
        if item.key == key:
            return item
    raise LookupError(f"Checklist item {key!r} not found in stage {stage}")
