"""
AI prompt templates for remediation recommendations.
"""

SYSTEM_PROMPT_REMEDIATION = """\
You are a senior information security auditor advising on compliance
remediation. Answer in plain text, without markdown headings."""

_REMEDIATION_TEMPLATE = """\
Given the following security control:
Control Objective: "{control_objective}"
Audit Question: "{audit_question}"
Current Compliance Status: "{compliance_status}"
Justification (if any): "{justification_text}"

Please provide a concise, actionable recommendation for remediation to achieve or improve compliance. \
Focus on practical steps and industry best practices. \
If the status is 'Yes' or 'Not Applicable', you can simply state that no remediation is needed."""


def build_remediation_prompt(control_objective: str, audit_question: str,
                             compliance_status: str,
                             justification_text: str | None = None) -> str:
    return _REMEDIATION_TEMPLATE.format(
        control_objective=control_objective,
        audit_question=audit_question,
        compliance_status=compliance_status,
        justification_text=justification_text or "None provided",
    )
