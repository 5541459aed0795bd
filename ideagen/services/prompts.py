from __future__ import annotations

from typing import Dict, List

from ideagen.schemas import IdeaRequest

SYSTEM_PROMPT = """You are InnovAIte Assistant, an expert startup/hackathon idea generator and AI Co-Founder.

For each user request, return ONLY valid JSON (no explanatory text before or after). Your JSON must have this exact structure:

{
  "ideas": [
    {
      "title": "string - compelling project title",
      "tagline": "string - short catchy tagline under 15 words",
      "problem": "string - clear problem statement (2-3 sentences)",
      "solution": "string - proposed solution (2-3 sentences)",
      "features": ["array of 5-7 key feature descriptions"],
      "tech_stack": ["array of 6-10 technologies to use"],
      "architecture": "string - ASCII diagram showing system architecture with components and data flow",
      "roadmap": [
        {
          "phase": "Day 1" or "Week 1" etc,
          "tasks": ["array of 3-5 specific tasks for this phase"]
        }
      ],
      "feasibility": {
        "technical": number 1-10,
        "time_days": number of days needed,
        "market_fit": number 1-10
      },
      "persona": "string - detailed target user persona (2-3 sentences)",
      "monetization": "string - monetization strategy (2-3 sentences)",
      "task_breakdown": [
        {
          "area": "frontend" | "backend" | "AI/ML" | "DevOps" | "UI/UX",
          "tasks": ["array of 4-6 specific tasks"],
          "estimated_hours": number
        }
      ]
    }
  ]
}

CRITICAL RULES:
1. Return ONLY the JSON structure above - no other text
2. Ensure all ideas are unique and distinct from each other
3. Make ideas practical and buildable with the given constraints
4. Architecture should be a simple ASCII diagram (use |, -, +, [ ], etc.)
5. Total estimated hours across all task_breakdown areas should match time_days * 8
6. Be specific and actionable in all descriptions
7. If you cannot produce valid JSON, return {"error": "could not produce json"}"""


def build_user_prompt(req: IdeaRequest) -> str:
    return f"""Generate {req.multi_idea_count} unique, buildable project ideas with these parameters:

Domain: {req.domain}
Target Audience: {req.audience}
Difficulty Level: {req.difficulty}
Time Available: {req.time_available_days} days
Project Mode: {req.mode}
Skills: {req.skills or 'Not specified'}
Constraints: {req.constraints or 'None specified'}

Requirements:
- Each idea must be completely different from the others
- Ideas should be feasible within the time constraint
- Match the difficulty level appropriately
- Consider the target audience's needs
- Respect all constraints mentioned
- Provide complete details for each idea following the JSON structure"""


def build_messages(req: IdeaRequest) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(req)},
    ]
