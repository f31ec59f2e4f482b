from __future__ import annotations

ATS_WEIGHTS = {
    "keyword_match": 0.4,
    "skills_alignment": 0.3,
    "experience_relevance": 0.2,
    "format_readability": 0.1,
}


def build_ats_score_prompt(resume_text: str, job_description_text: str) -> tuple[str, str]:
    system = (
        "You are an expert ATS (Applicant Tracking System) resume analyst. "
        "Score the resume against the job description on four dimensions, each 0-100: "
        "keyword_match, skills_alignment, experience_relevance, format_readability. "
        "Then write Markdown improvement notes with the heading '## Areas for Improvement' "
        "and two subheadings: '### Missing Keywords:' and '### Actionable Suggestions:'. "
        "Return JSON only. Schema: {\"dimensions\": {\"keyword_match\": number, \"skills_alignment\": number, "
        "\"experience_relevance\": number, \"format_readability\": number}, \"areas_for_improvement\": string}."
    )
    user = f"RESUME:\n```\n{resume_text}\n```\n\nJOB DESCRIPTION:\n```\n{job_description_text}\n```"
    return system, user


def build_enhance_prompt(
    resume_text: str,
    *,
    job_description: str | None = None,
    desired_role: str | None = None,
) -> tuple[str, str]:
    system = (
        "You are an expert resume writer specializing in ATS optimization. "
        "Improve keywords and phrasing, keep the original structure, and never alter personal "
        "information such as name, contact details or previous job titles. "
        "Format the result as Markdown with '## ' section headings and '- ' bullet points. "
        "Return JSON only. Schema: {\"enhanced_resume\": string}."
    )
    if job_description:
        target = f"JOB DESCRIPTION:\n```\n{job_description}\n```"
    else:
        target = f"DESIRED JOB ROLE: {desired_role}"
    user = f"{target}\n\nRESUME:\n```\n{resume_text}\n```"
    return system, user


def build_linkedin_analysis_prompt(profile_text: str, member_name: str | None = None) -> tuple[str, str]:
    system = (
        "You are an expert career coach and LinkedIn profile optimizer. "
        "Score the profile 0-100 on completeness, keyword optimization, clarity and impact. "
        "Give bulleted Markdown feedback on headline, About, experience and skills. "
        "Rewrite the headline, About and most recent experience entries as a Markdown document. "
        "Return JSON only. Schema: {\"profile_score\": number, \"feedback\": string, \"enhanced_profile\": string}."
    )
    owner = f"PROFILE OWNER: {member_name}\n\n" if member_name else ""
    user = f"{owner}PROFILE:\n```\n{profile_text}\n```"
    return system, user
