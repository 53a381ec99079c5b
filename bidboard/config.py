import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return float(default)


def _list_env(name: str) -> List[str]:
    return [v.strip() for v in os.getenv(name, "").split(",") if v.strip()]


# --- Job source (proxy) ---
JOB_SOURCE_URL = os.getenv("JOB_SOURCE_URL", "http://localhost:3001").rstrip("/")
JOB_SOURCE_BATCH_PATH = os.getenv("JOB_SOURCE_BATCH_PATH", "/api/upwork/batch")
JOB_SOURCE_SEARCH_PATH = os.getenv("JOB_SOURCE_SEARCH_PATH", "/api/upwork/search")
STATUS_TIMEOUT_SECONDS = _float_env("STATUS_TIMEOUT_SECONDS", 5)
FETCH_TIMEOUT_SECONDS = _float_env("FETCH_TIMEOUT_SECONDS", 30)
MAX_SEARCH_KEYWORDS = int(_float_env("MAX_SEARCH_KEYWORDS", 10))
FETCH_LIMIT = int(_float_env("FETCH_LIMIT", 0)) or None
RSS_FEED_URLS = _list_env("RSS_FEED_URLS")

# --- Schedules ---
STATUS_INTERVAL_SECONDS = int(_float_env("STATUS_INTERVAL_SECONDS", 30))
REFRESH_INTERVAL_SECONDS = int(_float_env("REFRESH_INTERVAL_SECONDS", 300))

# --- Proposal generation ---
GOOGLE_API_KEY_ENV = "GOOGLE_API_KEY"
PROPOSAL_MODEL = os.getenv("PROPOSAL_MODEL", "gemini-2.5-flash")
PROPOSAL_TIMEOUT_SECONDS = _float_env("PROPOSAL_TIMEOUT_SECONDS", 60)

# --- Storage / export ---
SETTINGS_FILE = os.getenv("SETTINGS_FILE", "bidboard_settings.json")
GOOGLE_SHEET_URL = os.getenv("GOOGLE_SHEET_URL", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Default service offerings - customize for your team
DEFAULT_OFFERINGS = [
    {
        "name": "AI Digital Marketing",
        "keywords": ["AI marketing", "digital marketing", "marketing automation", "AI campaign", "social media AI"],
        "rateMin": 70,
        "rateMax": 100,
        "skills": ["SEO", "Google Ads", "Social Media Marketing", "Copywriting", "Marketing Automation", "ChatGPT"],
    },
    {
        "name": "Website Design & Development",
        "keywords": ["website", "web design", "web development", "react", "nextjs", "frontend", "ecommerce"],
        "rateMin": 80,
        "rateMax": 110,
        "skills": ["React", "Next.js", "JavaScript", "TypeScript", "HTML", "CSS", "WordPress", "Shopify", "Figma"],
    },
    {
        "name": "AI Agents & Automation",
        "keywords": ["AI agent", "automation", "chatbot", "workflow automation", "RPA", "process automation"],
        "rateMin": 95,
        "rateMax": 125,
        "skills": ["Python", "LangChain", "OpenAI API", "Zapier", "Make.com", "n8n", "Chatbot Development"],
    },
    {
        "name": "Cybersecurity Support",
        "keywords": ["cybersecurity", "security audit", "penetration testing", "infosec", "vulnerability"],
        "rateMin": 100,
        "rateMax": 140,
        "skills": ["Penetration Testing", "Network Security", "Vulnerability Assessment", "SIEM", "ISO 27001"],
    },
    {
        "name": "IT Infrastructure",
        "keywords": ["IT infrastructure", "cloud migration", "AWS", "Azure", "DevOps", "server management"],
        "rateMin": 85,
        "rateMax": 115,
        "skills": ["AWS", "Azure", "Docker", "Kubernetes", "Terraform", "Linux", "CI/CD"],
    },
]
