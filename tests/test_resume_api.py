import os
import sys
import unittest
from io import BytesIO
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic: no real LLM calls, no rate limiting.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("LLM_ENABLED", "0")

from docx import Document  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.rate_limit import reset_rate_limits  # noqa: E402
from app.main import app  # noqa: E402
from app.services.llm import LLMError  # noqa: E402


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.resume_text = (
            "Jane Doe | jane@example.com\n"
            "Backend Engineer\n"
            "- Built Python APIs for payments used by 1.2M users.\n"
            "- Reduced latency by 38% with caching and async IO.\n"
        )
        cls.jd_text = (
            "We are hiring a Senior Backend Engineer with Python, FastAPI, PostgreSQL "
            "and cloud experience to scale our payments platform."
        )

    def setUp(self):
        reset_rate_limits()

    def test_ats_score_weights_dimensions(self):
        llm_payload = {
            "dimensions": {
                "keyword_match": 80,
                "skills_alignment": 70,
                "experience_relevance": 60,
                "format_readability": 100,
            },
            "areas_for_improvement": "## Areas for Improvement\n### Missing Keywords:\n- PostgreSQL",
        }
        with patch("app.services.resume_ai.json_completion", return_value=llm_payload) as mocked:
            response = self.client.post(
                "/v1/resume/ats-score",
                json={"resume_text": self.resume_text, "job_description_text": self.jd_text},
            )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        # 80*0.4 + 70*0.3 + 60*0.2 + 100*0.1 = 75
        self.assertEqual(body["ats_score"], 75)
        self.assertIn("Missing Keywords", body["areas_for_improvement"])
        self.assertEqual(mocked.call_args.kwargs["task"], "ats_score")

    def test_ats_score_clamps_flat_score(self):
        with patch(
            "app.services.resume_ai.json_completion",
            return_value={"ats_score": 140.6, "areas_for_improvement": "Add metrics."},
        ):
            response = self.client.post(
                "/v1/resume/ats-score",
                json={"resume_text": self.resume_text, "job_description_text": self.jd_text},
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["ats_score"], 100)

    def test_ats_score_requires_long_inputs(self):
        response = self.client.post(
            "/v1/resume/ats-score",
            json={"resume_text": "too short", "job_description_text": self.jd_text},
        )
        self.assertEqual(response.status_code, 422)

    def test_enhance_with_job_description(self):
        with patch(
            "app.services.resume_ai.json_completion",
            return_value={"enhanced_resume": "## Experience\n- Built FastAPI services"},
        ) as mocked:
            response = self.client.post(
                "/v1/resume/enhance",
                json={"resume_text": self.resume_text, "job_description": self.jd_text},
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["mode"], "job_description")
        self.assertIn("JOB DESCRIPTION", mocked.call_args.kwargs["user_prompt"])

    def test_enhance_with_desired_role(self):
        with patch(
            "app.services.resume_ai.json_completion",
            return_value={"enhanced_resume": "## Summary\nPlatform engineer"},
        ) as mocked:
            response = self.client.post(
                "/v1/resume/enhance",
                json={"resume_text": self.resume_text, "desired_role": "Platform Engineer"},
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["mode"], "desired_role")
        self.assertIn("Platform Engineer", mocked.call_args.kwargs["user_prompt"])

    def test_enhance_requires_a_target(self):
        response = self.client.post("/v1/resume/enhance", json={"resume_text": self.resume_text})
        self.assertEqual(response.status_code, 400)
        self.assertIn("job description or a desired job role", response.json()["detail"])

    def test_enhance_rejects_short_role(self):
        response = self.client.post(
            "/v1/resume/enhance",
            json={"resume_text": self.resume_text, "desired_role": "QA"},
        )
        self.assertEqual(response.status_code, 400)

    def test_llm_unavailable_returns_503(self):
        with patch(
            "app.services.resume_ai.json_completion",
            side_effect=LLMError("The AI service is not configured.", code="llm_disabled"),
        ):
            response = self.client.post(
                "/v1/resume/enhance",
                json={"resume_text": self.resume_text, "desired_role": "Platform Engineer"},
            )
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"]["code"], "llm_disabled")

    def test_incomplete_llm_payload_returns_503(self):
        with patch("app.services.resume_ai.json_completion", return_value={"enhanced_resume": ""}):
            response = self.client.post(
                "/v1/resume/enhance",
                json={"resume_text": self.resume_text, "desired_role": "Platform Engineer"},
            )
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"]["code"], "llm_invalid")

    def test_linkedin_analysis_uses_signed_in_name(self):
        with patch(
            "app.services.resume_ai.json_completion",
            return_value={"profile_score": 64, "feedback": "- Add a headline", "enhanced_profile": "## About"},
        ) as mocked:
            response = self.client.post(
                "/v1/linkedin/analyze",
                json={
                    "profile_text": self.resume_text,
                    "profile": {"name": "Jane Doe", "email": "jane@example.com"},
                },
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["profile_score"], 64)
        self.assertIn("PROFILE OWNER: Jane Doe", mocked.call_args.kwargs["user_prompt"])

    def test_extract_text_from_docx_upload(self):
        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("Backend Engineer with Python and FastAPI")
        buffer = BytesIO()
        document.save(buffer)

        response = self.client.post(
            "/v1/resume/extract-text",
            files={"file": ("resume.docx", buffer.getvalue(), "application/octet-stream")},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["source_type"], "docx")
        self.assertEqual(body["text"], "Jane Doe\nBackend Engineer with Python and FastAPI")
        self.assertEqual(body["characters"], len(body["text"]))

    def test_extract_text_rejects_unknown_type(self):
        response = self.client.post(
            "/v1/resume/extract-text",
            files={"file": ("resume.exe", b"MZ\x90\x00", "application/octet-stream")},
        )
        self.assertEqual(response.status_code, 415)

    def test_extract_text_rejects_empty_file(self):
        response = self.client.post(
            "/v1/resume/extract-text",
            files={"file": ("resume.txt", b"", "text/plain")},
        )
        self.assertEqual(response.status_code, 400)

    def test_export_docx_download(self):
        response = self.client.post(
            "/v1/resume/export",
            json={"content": "## Experience\n- **Built** APIs\n1. Shipped things", "format": "docx"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b"PK"))
        self.assertIn('filename="enhanced-resume.docx"', response.headers["content-disposition"])

    def test_export_txt_download(self):
        response = self.client.post("/v1/resume/export", json={"content": "Plain resume", "format": "txt"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Plain resume")
        self.assertTrue(response.headers["content-type"].startswith("text/plain"))

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
