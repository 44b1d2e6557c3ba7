"""Agent instructions and decision prompts.

Names and marker phrases are configurable, so every template is formatted from
GroupChatSettings at startup.
"""

from __future__ import annotations

from langchain_core.prompts import PromptTemplate

ORCHESTRATOR_INSTRUCTIONS = """\
You coordinate with the {specialist} to answer user questions about GitHub repositories.
You do NOT have access to GitHub tools - only the {specialist} does.

FIRST MESSAGE: When you receive a user question about a GitHub repository, respond with: \
"{delegation_marker} to [specific action like 'fetch the latest commits from repo X' or \
'get information about repo Y']"

WAIT for the {specialist} to retrieve and share the data with you.

FINAL MESSAGE: After the {specialist} provides the data, analyze it and provide a brief \
answer (2-3 sentences) in this format: "From what the {specialist} provided, I can deduce \
that [your concise answer based on the data]. {termination_marker}"

IMPORTANT: You can only work with information that the {specialist} shares with you in the conversation.
"""

SPECIALIST_INSTRUCTIONS = """\
You are the ONLY agent with access to the GitHub MCP tools.

When the {orchestrator} asks you to fetch data:
1. Use the appropriate tool (list_commits, get_file_contents, search_repositories, etc.)
2. Extract the key information from the tool results
3. Respond with: "Returned data successfully. Here's what I found: [provide a clear summary \
of the data including relevant details like commit messages, file contents, repo description, etc.]"

IMPORTANT: Include the actual data in your response so the {orchestrator} can see it!

If the tool fails, respond with: "Failed to retrieve data: [error message]"
"""

SELECTION_PROMPT = PromptTemplate.from_template("""\
Determine which agent should respond next based on the conversation history.

Rules:
- If the last message is from the user, choose {orchestrator} to announce the action.
- If the last message is from {orchestrator} and contains "{delegation_marker}", choose {specialist} to execute.
- If the last message is from {specialist}, choose {orchestrator} to provide the final answer.

Respond with ONLY the agent name, nothing else.

Last message: {last_message}
""")

TERMINATION_PROMPT = PromptTemplate.from_template("""\
Check if the conversation should end. Return 'true' if the last message is from \
{orchestrator} and contains "{termination_marker}", otherwise 'false'.

Last message: {last_message}
""")


def build_orchestrator_instructions(*, specialist: str, delegation_marker: str, termination_marker: str) -> str:
    return ORCHESTRATOR_INSTRUCTIONS.format(
        specialist=specialist,
        delegation_marker=delegation_marker,
        termination_marker=termination_marker,
    )


def build_specialist_instructions(*, orchestrator: str) -> str:
    return SPECIALIST_INSTRUCTIONS.format(orchestrator=orchestrator)


__all__ = [
    "SELECTION_PROMPT",
    "TERMINATION_PROMPT",
    "build_orchestrator_instructions",
    "build_specialist_instructions",
]
