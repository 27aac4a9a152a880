"""Turn an uploaded resume into skills, experience and education lists.

Supports PDF (via pdftotext or pypdf), DOCX (via stdlib zipfile) and TXT.
With a configured LLM the text is parsed by the model; otherwise a heuristic
extractor is used.
"""
from __future__ import annotations

import re
import shutil
import subprocess
import zipfile
from pathlib import Path
from xml.etree import ElementTree

from career_spark.llm import LLMClient, LLMError
from career_spark.log import get_logger
from career_spark.models import ParsedResume
from career_spark.retry import retry
from career_spark.schemas import ParsedResumeOutput

log = get_logger(__name__)

SUPPORTED_SUFFIXES = (".pdf", ".docx", ".txt")

# ── Text extraction ──────────────────────────────────────────────────────


def extract_text(path: Path) -> str:
    """Return plain text from a PDF, DOCX, or TXT file."""
    suffix = path.suffix.lower()
    if suffix == ".txt":
        return path.read_text(encoding="utf-8", errors="ignore")
    if suffix == ".docx":
        return _extract_docx(path)
    if suffix == ".pdf":
        return _extract_pdf(path)
    raise ValueError(f"Unsupported resume format: {suffix}")


def _fix_spacing(text: str) -> str:
    """Re-insert spaces when PDF extraction runs words together."""
    if not text or len(text) < 50:
        return text
    space_ratio = text.count(" ") / len(text)
    if space_ratio > 0.08:
        return text

    log.debug("Low space ratio (%.2f%%), applying spacing fix", space_ratio * 100)
    fixed = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    fixed = re.sub(r"([a-zA-Z])(\d)", r"\1 \2", fixed)
    fixed = re.sub(r"(\d)([a-zA-Z])", r"\1 \2", fixed)
    fixed = re.sub(r"([.!?,;:])([A-Za-z])", r"\1 \2", fixed)
    return fixed


def _extract_pdf(path: Path) -> str:
    # pdftotext keeps layout spacing better than pypdf
    if shutil.which("pdftotext"):
        result = subprocess.run(
            ["pdftotext", "-layout", str(path), "-"],
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout

    from pypdf import PdfReader

    reader = PdfReader(str(path))
    return "\n".join(_fix_spacing(page.extract_text() or "") for page in reader.pages)


def _extract_docx(path: Path) -> str:
    ns = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"
    texts: list[str] = []
    with zipfile.ZipFile(path) as zf:
        with zf.open("word/document.xml") as f:
            tree = ElementTree.parse(f)
            for para in tree.iter(f"{ns}p"):
                parts = [node.text for node in para.iter(f"{ns}t") if node.text]
                if parts:
                    texts.append("".join(parts))
    return "\n".join(texts)


# ── LLM-based extraction ────────────────────────────────────────────────

_PARSE_PROMPT = """\
You are a resume parsing expert. Extract key information from the resume text below.

- "skills": every skill, technology, tool or soft skill mentioned.
- "experience": one entry per professional role, as "Job Title at Company". Omit dates.
- "education": one entry per degree, as "Degree, Institution". Omit dates.

Return ONLY valid JSON:
{{"skills": ["..."], "experience": ["..."], "education": ["..."]}}

Resume text:
{resume_text}
"""


@retry(max_attempts=2, base_delay=2.0, retryable=(LLMError,))
def _llm_parse(resume_text: str, llm: LLMClient) -> ParsedResumeOutput:
    return llm.complete_json(
        _PARSE_PROMPT.format(resume_text=resume_text[:8000]),
        ParsedResumeOutput,
        max_tokens=1200,
        temperature=0.1,
    )


# ── Heuristic fallback ──────────────────────────────────────────────────

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+"
_YEAR = rf"(?:{_MONTH})?(?:19|20)\d{{2}}"
_DATE_RE = re.compile(
    rf"\(?\b{_YEAR}(?:\s*(?:-|–|—|to)\s*(?:present|current|now|{_YEAR}))?\)?",
    re.IGNORECASE,
)

_COMMON_SKILLS = [
    "python", "java", "javascript", "typescript", "react", "node", "angular",
    "vue", "sql", "nosql", "mongodb", "postgresql", "mysql", "redis",
    "docker", "kubernetes", "aws", "gcp", "azure", "terraform", "ansible",
    "jenkins", "git", "linux", "ci/cd", "rest", "graphql", "microservices",
    "agile", "scrum", "jira", "excel", "power bi", "tableau", "sap",
    "salesforce", "recruitment", "onboarding", "payroll", "compliance",
    "machine learning", "deep learning", "nlp", "data science", "pandas",
    "tensorflow", "pytorch", "spark", "kafka", "elasticsearch",
    "figma", "sketch", "photoshop", "illustrator", "ui/ux", "seo",
    "marketing", "communication", "leadership", "project management",
    "stakeholder management",
]

_ROLE_WORDS = (
    "engineer", "manager", "developer", "analyst", "designer", "consultant",
    "lead", "director", "specialist", "coordinator", "executive", "architect",
    "scientist", "officer", "intern", "associate",
)
_EDUCATION_WORDS = (
    "bachelor", "master", "b.sc", "m.sc", "b.tech", "m.tech", "b.e", "mba",
    "phd", "ph.d", "diploma", "university", "college", "institute",
)


def _clean_line(line: str) -> str:
    line = _DATE_RE.sub("", line)
    return re.sub(r"\s{2,}", " ", line).strip(" \t-•|,")


def _heuristic_parse(text: str) -> ParsedResume:
    """Best-effort extraction without an LLM."""
    low = text.lower()
    skills = [s for s in _COMMON_SKILLS if re.search(rf"(?<![a-z]){re.escape(s)}(?![a-z])", low)]

    experience: list[str] = []
    education: list[str] = []
    for raw in text.splitlines():
        line = _clean_line(raw)
        if not 3 < len(line) < 100:
            continue
        lowered = line.lower()
        if any(word in lowered for word in _EDUCATION_WORDS):
            education.append(line)
        elif any(re.search(rf"\b{word}\b", lowered) for word in _ROLE_WORDS):
            experience.append(line)

    return ParsedResume(
        skills=skills[:20],
        experience=list(dict.fromkeys(experience))[:10],
        education=list(dict.fromkeys(education))[:5],
    )


# ── Public API ───────────────────────────────────────────────────────────


def parse_resume_text(text: str, llm: LLMClient | None = None) -> ParsedResume:
    if not text.strip():
        raise ValueError("Resume text is empty")

    if llm is not None and llm.configured:
        log.info("Parsing resume with LLM (%s)", llm.model)
        data = _llm_parse(text, llm)
        parsed = ParsedResume(
            skills=[s.strip() for s in data.skills if s.strip()],
            experience=[e.strip() for e in data.experience if e.strip()],
            education=[e.strip() for e in data.education if e.strip()],
        )
    else:
        log.info("No LLM configured, parsing resume with heuristic extractor")
        parsed = _heuristic_parse(text)

    log.info(
        "Resume parsed: skills=%d, experience=%d, education=%d",
        len(parsed.skills), len(parsed.experience), len(parsed.education),
    )
    return parsed


def parse_resume(path: Path, llm: LLMClient | None = None) -> ParsedResume:
    """Extract skills, experience and education from a resume file."""
    log.info("Extracting text from %s", path.name)
    text = extract_text(path)
    if not text.strip():
        raise ValueError(f"Could not extract any text from {path.name}")
    return parse_resume_text(text, llm)
