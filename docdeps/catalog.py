"""Stock template catalog.

Identifiers are the storage ids of the stock template database, so that
documents produced by the generator resolve without extra configuration.
The first alias listed for a template is its primary key.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .models import TemplateDescriptor


BUSINESS_CASE = "68d253d1e8b84159bab03dd0"
MISSION_VISION = "68d259753673e196a415f237"
PROJECT_CHARTER = "68d2593d5c548d6a3b30d271"
FUNCTIONAL_REQUIREMENTS = "68d2593d5c548d6a3b30d26c"
RISK_ASSESSMENT = "68d2593d5c548d6a3b30d26e"
TEST_PLAN = "68d2593d5c548d6a3b30d26f"
API_DOCUMENTATION = "68d2593d5c548d6a3b30d272"
SYSTEM_ARCHITECTURE = "68d2593d5c548d6a3b30d26d"
TECHNICAL_REQUIREMENTS = "68d253d1e8b84159bab03dd1"
USER_STORIES = "68d253d1e8b84159bab03dcf"
DATA_GOVERNANCE = "68d2593d5c548d6a3b30d270"
USER_STORIES_AGILE = "68cf9f7e0b991a497873ef9d"


DEFAULT_TEMPLATES: Tuple[TemplateDescriptor, ...] = (
    TemplateDescriptor(
        id=BUSINESS_CASE,
        name="Business Case Template",
        category="Strategic Planning",
        priority="critical",
        knowledge_area="Integration Management",
        description="Strategic justification and financial analysis",
        estimated_effort="4-6 hours",
    ),
    TemplateDescriptor(
        id=MISSION_VISION,
        name="Company Mission Vision and Core Values",
        category="Strategic Planning",
        priority="critical",
        knowledge_area="Integration Management",
        description="Company mission, vision and core values alignment",
        estimated_effort="2-4 hours",
    ),
    TemplateDescriptor(
        id=PROJECT_CHARTER,
        name="Project Charter Template",
        category="Project Management",
        priority="critical",
        knowledge_area="Integration Management",
        dependencies=(BUSINESS_CASE,),
        description="Comprehensive project charter document for project initiation and approval",
        estimated_effort="2-3 hours",
    ),
    TemplateDescriptor(
        id=FUNCTIONAL_REQUIREMENTS,
        name="Functional Requirements Specification",
        category="Requirements Management",
        priority="critical",
        knowledge_area="Scope Management",
        dependencies=(PROJECT_CHARTER,),
        description="Detailed functional requirements document covering system behavior and capabilities",
        estimated_effort="4-6 hours",
    ),
    TemplateDescriptor(
        id=RISK_ASSESSMENT,
        name="Risk Assessment Report",
        category="Risk Management",
        priority="high",
        knowledge_area="Risk Management",
        dependencies=(PROJECT_CHARTER,),
        description="Comprehensive risk analysis and mitigation strategy document for project planning",
        estimated_effort="2-4 hours",
    ),
    TemplateDescriptor(
        id=TEST_PLAN,
        name="Test Plan Document",
        category="Testing",
        priority="high",
        knowledge_area="Quality Management",
        dependencies=(FUNCTIONAL_REQUIREMENTS,),
        description="Comprehensive test planning document covering all testing phases and strategies",
        estimated_effort="3-4 hours",
    ),
    TemplateDescriptor(
        id=API_DOCUMENTATION,
        name="API Documentation Template",
        category="Technical Documentation",
        priority="medium",
        knowledge_area="Quality Management",
        dependencies=(FUNCTIONAL_REQUIREMENTS,),
        description="Comprehensive API documentation template with endpoints, parameters, and examples",
        estimated_effort="3-4 hours",
    ),
    TemplateDescriptor(
        id=SYSTEM_ARCHITECTURE,
        name="System Architecture Document",
        category="Technical Architecture",
        priority="high",
        knowledge_area="Integration Management",
        dependencies=(FUNCTIONAL_REQUIREMENTS,),
        description="Comprehensive system architecture documentation with technical design and component interactions",
        estimated_effort="4-6 hours",
    ),
    TemplateDescriptor(
        id=TECHNICAL_REQUIREMENTS,
        name="Technical Requirements Template",
        category="Technical Requirements",
        priority="high",
        knowledge_area="Quality Management",
        dependencies=(FUNCTIONAL_REQUIREMENTS,),
        description="Comprehensive technical requirements specification template",
        estimated_effort="3-4 hours",
    ),
    TemplateDescriptor(
        id=USER_STORIES,
        name="User Stories Template",
        category="Requirements Management",
        priority="high",
        knowledge_area="Scope Management",
        dependencies=(FUNCTIONAL_REQUIREMENTS,),
        description="Comprehensive template for creating user stories with acceptance criteria",
        estimated_effort="2-3 hours",
    ),
    TemplateDescriptor(
        id=DATA_GOVERNANCE,
        name="Data Governance Policy",
        category="Data Management",
        priority="high",
        knowledge_area="Quality Management",
        description="Comprehensive data governance framework and policy document following DMBOK standards",
        estimated_effort="4-6 hours",
    ),
    TemplateDescriptor(
        id=USER_STORIES_AGILE,
        name="User Stories",
        category="Requirements",
        priority="high",
        knowledge_area="Scope Management",
        dependencies=(BUSINESS_CASE,),
        description="User stories and acceptance criteria for agile development",
        estimated_effort="2-4 hours",
    ),
)


# Ordered: the first key for each id is the one reported back to callers.
DEFAULT_ALIASES: Dict[str, str] = {
    "business-case": BUSINESS_CASE,
    "business-case-template": BUSINESS_CASE,
    "Business Case": BUSINESS_CASE,
    "Business Case Template": BUSINESS_CASE,
    "company-mission-vision-and-core-values": MISSION_VISION,
    "mission-vision-core-values": MISSION_VISION,
    "project-charter": PROJECT_CHARTER,
    "project-charter-template": PROJECT_CHARTER,
    "Project Charter": PROJECT_CHARTER,
    "Project Charter Template": PROJECT_CHARTER,
    "functional-requirements": FUNCTIONAL_REQUIREMENTS,
    "functional-requirements-spec": FUNCTIONAL_REQUIREMENTS,
    "Functional Requirements": FUNCTIONAL_REQUIREMENTS,
    "Functional Requirements Specification": FUNCTIONAL_REQUIREMENTS,
    "risk-assessment": RISK_ASSESSMENT,
    "risk-assessment-report": RISK_ASSESSMENT,
    "Risk Assessment": RISK_ASSESSMENT,
    "Risk Assessment Report": RISK_ASSESSMENT,
    "test-plan": TEST_PLAN,
    "test-plan-document": TEST_PLAN,
    "Test Plan": TEST_PLAN,
    "Test Plan Document": TEST_PLAN,
    "api-documentation": API_DOCUMENTATION,
    "api-documentation-template": API_DOCUMENTATION,
    "API Documentation": API_DOCUMENTATION,
    "API Documentation Template": API_DOCUMENTATION,
    "system-architecture": SYSTEM_ARCHITECTURE,
    "system-architecture-doc": SYSTEM_ARCHITECTURE,
    "System Architecture": SYSTEM_ARCHITECTURE,
    "System Architecture Document": SYSTEM_ARCHITECTURE,
    "technical-requirements": TECHNICAL_REQUIREMENTS,
    "technical-requirements-template": TECHNICAL_REQUIREMENTS,
    "Technical Requirements": TECHNICAL_REQUIREMENTS,
    "Technical Requirements Template": TECHNICAL_REQUIREMENTS,
    "user-stories": USER_STORIES,
    "user-stories-template": USER_STORIES,
    "User Stories": USER_STORIES,
    "User Stories Template": USER_STORIES,
    "data-governance-plan": DATA_GOVERNANCE,
    "data-governance-policy": DATA_GOVERNANCE,
    "Data Governance Plan": DATA_GOVERNANCE,
    "Data Governance Policy": DATA_GOVERNANCE,
    "user-stories-alt": USER_STORIES_AGILE,
    "User Stories Alt": USER_STORIES_AGILE,
}


# Inference tables for registries built from raw template records.

CATEGORY_KNOWLEDGE_AREAS: Dict[str, str] = {
    "project-charter": "Integration Management",
    "scope-management": "Scope Management",
    "stakeholder-management": "Stakeholder Management",
    "requirements": "Scope Management",
    "quality-assurance": "Quality Management",
    "risk-management": "Risk Management",
    "cost-management": "Cost Management",
    "schedule-management": "Schedule Management",
    "resource-management": "Resource Management",
    "communication-management": "Communication Management",
    "procurement-management": "Procurement Management",
    "strategic-statements": "Integration Management",
    "technical-design": "Integration Management",
    "technical-analysis": "Integration Management",
    "implementation-guides": "Integration Management",
    "pmbok": "Integration Management",
    "data-management": "Data Governance",
    "test": "Quality Management",
}
DEFAULT_KNOWLEDGE_AREA = "Integration Management"

CRITICAL_CATEGORIES = ("project-charter", "scope-management", "stakeholder-management")
HIGH_CATEGORIES = ("requirements", "risk-management", "quality-assurance")

CATEGORY_DEPENDENCIES: Dict[str, List[str]] = {
    "scope-management": ["stakeholder-management"],
    "requirements": ["scope-management", "stakeholder-management"],
    "risk-management": ["scope-management"],
    "quality-assurance": ["requirements"],
    "cost-management": ["scope-management"],
    "schedule-management": ["scope-management"],
    "resource-management": ["scope-management"],
    "communication-management": ["stakeholder-management"],
    "procurement-management": ["scope-management"],
}

CATEGORY_EFFORT: Dict[str, str] = {
    "project-charter": "4-6 hours",
    "scope-management": "3-5 hours",
    "stakeholder-management": "3-4 hours",
    "requirements": "4-6 hours",
    "risk-management": "2-4 hours",
    "quality-assurance": "3-4 hours",
    "cost-management": "3-4 hours",
    "schedule-management": "3-5 hours",
    "resource-management": "2-3 hours",
    "communication-management": "2-3 hours",
    "procurement-management": "2-4 hours",
    "strategic-statements": "4-6 hours",
    "technical-design": "4-8 hours",
    "technical-analysis": "3-6 hours",
    "implementation-guides": "2-4 hours",
    "test": "1-2 hours",
}
DEFAULT_EFFORT = "2-4 hours"
