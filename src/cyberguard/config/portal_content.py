"""Portal content loader.

The portal pages are served from fixed payloads. Built-in defaults live
here; sections can be replaced by data/config/portal_content_v1.yaml.

Usage:
    from cyberguard.config.portal_content import get_section

    modules = get_section("modules")
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Override file path (relative to project root)
CONTENT_FILE = Path("data/config/portal_content_v1.yaml")

# Module-level cache
_cached_content: dict[str, Any] | None = None


def _get_default_content() -> dict[str, Any]:
    """Get the built-in portal payloads."""
    return {
        "security_score": {
            "score": 73,
            "change": 5,
            "strengths": 4,
            "warnings": 2,
            "critical": 1,
        },
        "team_progress": [
            {"username": "Emma Watson", "progress": 85},
            {"username": "Michael Brown", "progress": 64},
            {"username": "David Clark", "progress": 45},
        ],
        "activities": [
            {"id": 1, "type": "success", "title": "Password Policy Updated", "time": "2 hours ago"},
            {"id": 2, "type": "info", "title": "New User Onboarded", "time": "Yesterday"},
            {"id": 3, "type": "error", "title": "Failed Login Attempts (3)", "time": "3 days ago"},
        ],
        "dashboard_modules": [
            {
                "id": 1,
                "title": "Password Security",
                "description": "Best practices for creating and managing secure passwords",
                "status": "completed",
                "duration": "15 min",
                "rating": 4.8,
            },
            {
                "id": 2,
                "title": "Phishing Awareness",
                "description": "How to identify and avoid phishing attempts",
                "status": "in-progress",
                "duration": "20 min",
                "progress": 45,
            },
            {
                "id": 3,
                "title": "Data Protection",
                "description": "Guidelines for securing sensitive company data",
                "status": "not-started",
                "duration": "25 min",
            },
        ],
        "news": [
            {
                "id": 1,
                "category": "Threat Intelligence",
                "title": "New Ransomware Variant Targeting SMEs",
                "description": (
                    "A new strain of ransomware has been observed targeting small and "
                    "medium businesses through vulnerabilities in outdated CMS platforms."
                ),
                "time": "3 days ago",
            },
            {
                "id": 2,
                "category": "Critical Alert",
                "title": "Major SaaS Provider Reports Data Breach",
                "description": (
                    "Users of CloudService are advised to change their passwords immediately "
                    "following a security incident affecting their authentication database."
                ),
                "time": "1 week ago",
                "is_critical": True,
            },
        ],
        "modules": [
            {
                "id": 1,
                "title": "Password Security",
                "description": "Best practices for creating and managing secure passwords",
                "category": "General Security",
                "duration": "15 min",
                "status": "completed",
                "progress": 100,
                "rating": 4.8,
                "level": "beginner",
            },
            {
                "id": 2,
                "title": "Phishing Awareness",
                "description": "How to identify and avoid phishing attempts",
                "category": "Email Security",
                "duration": "20 min",
                "status": "in-progress",
                "progress": 45,
                "level": "beginner",
            },
            {
                "id": 3,
                "title": "Data Protection",
                "description": "Guidelines for securing sensitive company data",
                "category": "Data Security",
                "duration": "25 min",
                "status": "not-started",
                "level": "intermediate",
            },
            {
                "id": 4,
                "title": "Mobile Device Security",
                "description": "How to secure smartphones and tablets used for work",
                "category": "Device Security",
                "duration": "20 min",
                "status": "not-started",
                "level": "beginner",
            },
            {
                "id": 5,
                "title": "Social Engineering Tactics",
                "description": "Understanding and preventing social manipulation attacks",
                "category": "Threat Awareness",
                "duration": "30 min",
                "status": "not-started",
                "level": "intermediate",
            },
        ],
        "assessments": [
            {
                "id": 1,
                "title": "Password Security Fundamentals",
                "description": "Test your knowledge on creating and managing secure passwords",
                "questions": 10,
                "time_limit": "15 min",
                "status": "completed",
                "score": 90,
                "related_module": "Password Security",
                "completed_date": "2 weeks ago",
            },
            {
                "id": 2,
                "title": "Phishing Attack Recognition",
                "description": "Identify common phishing tactics and prevention methods",
                "questions": 12,
                "time_limit": "20 min",
                "status": "in-progress",
                "related_module": "Phishing Awareness",
                "due_date": "3 days",
            },
            {
                "id": 3,
                "title": "Data Protection Principles",
                "description": "Test your understanding of data security best practices",
                "questions": 15,
                "time_limit": "25 min",
                "status": "not-started",
                "related_module": "Data Protection",
                "due_date": "1 week",
            },
        ],
        "threats": [
            {
                "id": 1,
                "title": "New Ransomware Variant Targeting SMEs",
                "summary": (
                    "A new strain of ransomware has been observed targeting small and "
                    "medium businesses through vulnerabilities in outdated CMS platforms."
                ),
                "category": "Ransomware",
                "severity": "high",
                "date": "3 days ago",
                "source": "CyberSecurity News",
                "content": (
                    "Security researchers have identified a new ransomware variant named "
                    "'LockBit 3.0' specifically targeting small and medium enterprises. "
                    "This ransomware exploits vulnerabilities in outdated content management "
                    "systems, particularly WordPress plugins that haven't been updated. Once "
                    "infected, the ransomware encrypts all files and demands payment in "
                    "cryptocurrency."
                ),
                "industries": ["Retail", "Healthcare", "Financial Services"],
                "tags": ["Ransomware", "CMS", "WordPress"],
                "recommendations": [
                    "Update all CMS platforms and plugins to the latest versions immediately",
                    "Implement regular backup procedures with offline storage",
                    "Deploy endpoint protection solutions with anti-ransomware capabilities",
                    "Conduct security awareness training focused on phishing detection",
                ],
            },
            {
                "id": 2,
                "title": "Major SaaS Provider Reports Data Breach",
                "summary": (
                    "Users of CloudService are advised to change their passwords immediately "
                    "following a security incident affecting their authentication database."
                ),
                "category": "Data Breach",
                "severity": "critical",
                "date": "1 week ago",
                "source": "TechSecurity Today",
                "content": (
                    "CloudService, a major SaaS provider with over 2 million business users, "
                    "has disclosed a significant data breach affecting their authentication "
                    "systems. The breach, discovered during routine security monitoring, "
                    "exposed user credentials including hashed passwords."
                ),
                "industries": ["All industries"],
                "tags": ["Data Breach", "SaaS", "Authentication"],
                "recommendations": [
                    "Change passwords for CloudService accounts immediately",
                    "Enable two-factor authentication",
                    "Monitor for suspicious activity on accounts",
                    "Review and revoke unnecessary API integrations",
                ],
            },
        ],
        "resources": [
            {
                "id": 1,
                "title": "SME Cybersecurity Checklist",
                "description": "A comprehensive checklist for evaluating your organization's security posture",
                "type": "document",
                "category": "Guidelines",
                "url": "/resources/cybersecurity-checklist.pdf",
                "file_size": "1.2 MB",
                "last_updated": "2 months ago",
                "popular": True,
            },
            {
                "id": 2,
                "title": "Password Policy Template",
                "description": "Customizable template for creating an effective password policy",
                "type": "template",
                "category": "Templates",
                "url": "/resources/password-policy-template.docx",
                "file_size": "845 KB",
                "last_updated": "3 months ago",
            },
            {
                "id": 3,
                "title": "Phishing Response Playbook",
                "description": "Step-by-step guide for responding to phishing incidents",
                "type": "document",
                "category": "Playbooks",
                "url": "/resources/phishing-response-playbook.pdf",
                "file_size": "2.3 MB",
                "last_updated": "1 month ago",
                "popular": True,
            },
        ],
        "report_team_progress": [
            {
                "id": 1, "username": "Emma Watson", "role": "HR Manager",
                "completed_modules": 4, "total_modules": 5,
                "completed_assessments": 3, "total_assessments": 4,
                "average_score": 92, "last_activity": "Today",
            },
            {
                "id": 2, "username": "Michael Brown", "role": "Finance Director",
                "completed_modules": 3, "total_modules": 5,
                "completed_assessments": 2, "total_assessments": 4,
                "average_score": 85, "last_activity": "Yesterday",
            },
            {
                "id": 3, "username": "David Clark", "role": "IT Specialist",
                "completed_modules": 5, "total_modules": 5,
                "completed_assessments": 4, "total_assessments": 4,
                "average_score": 98, "last_activity": "2 days ago",
            },
        ],
        "module_completion": [
            {"name": "Password Security", "completed": 24, "in_progress": 6, "not_started": 2},
            {"name": "Phishing Awareness", "completed": 18, "in_progress": 10, "not_started": 4},
            {"name": "Data Protection", "completed": 12, "in_progress": 8, "not_started": 12},
        ],
        "assessment_scores": [
            {"name": "Password Security", "average_score": 88, "users_completed": 24},
            {"name": "Phishing Attack Recognition", "average_score": 76, "users_completed": 18},
            {"name": "Data Protection Principles", "average_score": 82, "users_completed": 12},
        ],
        "awareness_trend": [
            {"date": "Jan", "awareness_score": 45},
            {"date": "Feb", "awareness_score": 52},
            {"date": "Mar", "awareness_score": 58},
            {"date": "Apr", "awareness_score": 62},
            {"date": "May", "awareness_score": 70},
            {"date": "Jun", "awareness_score": 73},
        ],
        "security_incidents": [
            {"id": 1, "type": "Phishing Attempt", "date": "2 days ago", "source": "Email", "status": "Resolved", "impact": "low"},
            {"id": 2, "type": "Unauthorized Access Attempt", "date": "1 week ago", "source": "VPN", "status": "Resolved", "impact": "medium"},
            {"id": 3, "type": "Data Leak", "date": "2 weeks ago", "source": "Cloud Storage", "status": "Resolved", "impact": "high"},
        ],
    }


SECTIONS = tuple(_get_default_content().keys())


def load_portal_content(force_reload: bool = False) -> dict[str, Any]:
    """Load portal payloads, applying overrides from the YAML file.

    Each top-level key in the file replaces the whole default section of the
    same name. Unknown keys are ignored with a warning.

    Args:
        force_reload: If True, ignore cache and reload from file.

    Returns:
        Dictionary mapping section name to its payload.
    """
    global _cached_content

    if _cached_content is not None and not force_reload:
        return _cached_content

    content = _get_default_content()

    if CONTENT_FILE.exists():
        overrides = yaml.safe_load(CONTENT_FILE.read_text(encoding="utf-8")) or {}
        for section, payload in overrides.items():
            if section not in content:
                logger.warning("unknown_content_section", section=section)
                continue
            content[section] = payload
        logger.debug("loaded_portal_content", source=str(CONTENT_FILE), overrides=len(overrides))

    _cached_content = content
    return _cached_content


def get_section(name: str) -> Any:
    """Get a copy of one portal section.

    Raises:
        KeyError: If the section does not exist.
    """
    return copy.deepcopy(load_portal_content()[name])


def clear_content_cache() -> None:
    """Clear the content cache."""
    global _cached_content
    _cached_content = None
