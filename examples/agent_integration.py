#!/usr/bin/env python3
"""Example showing how an agent loop hands tool calls to line-editor."""

import json
import tempfile

from line_editor import AgentEditTools


class SimpleAIAgent:
    """A stand-in for an LLM agent that issues tool calls."""

    def __init__(self, workspace_dir: str):
        """Initialize agent with workspace."""
        self.tools = AgentEditTools(workspace_dir)

    def call(self, name: str, payload: dict) -> str:
        """Run a tool call and format the result the way a chat loop would."""
        print(f"tool: {name}({json.dumps(payload)})")
        result = self.tools.execute(name, payload)
        prefix = "error" if result.is_error else "result"
        return f"{prefix}: {result.content}"


def demonstrate_agent_usage():
    """Walk through creating, editing and reading a file."""
    with tempfile.TemporaryDirectory() as workspace:
        agent = SimpleAIAgent(workspace)

        print("=== line-editor agent demo ===")

        # Scenario 1: bootstrap a new file and keep editing it in the same batch
        print("\n1. Creating a file...")
        print(agent.call("edit_file", {
            "path": "src/hello.py",
            "edits": [
                {"operation_type": "create_file", "new_content": "def hello():"},
                {"operation_type": "append_to_file",
                 "new_content": ["    print('hello')", "", "hello()"]},
            ],
        }))

        # Scenario 2: line numbers shift as the batch runs
        print("\n2. Editing with sequential line numbers...")
        print(agent.call("edit_file", {
            "path": "src/hello.py",
            "edits": [
                {"operation_type": "insert_line_before", "line_number": 1,
                 "new_content": "import sys"},
                {"operation_type": "insert_line_after", "line_number": 1,
                 "new_content": ""},
                {"operation_type": "replace_string_in_line", "line_number": 4,
                 "old_string": "'hello'", "new_string": "'hello', file=sys.stderr"},
            ],
        }))

        # Scenario 3: read back a window
        print("\n3. Reading lines 1-4...")
        print(agent.call("read_lines", {"path": "src/hello.py", "start_line": 1, "end_line": 5}))

        # Scenario 4: a failing batch leaves the file alone
        print("\n4. A batch that fails part way...")
        print(agent.call("edit_file", {
            "path": "src/hello.py",
            "edits": [
                {"operation_type": "delete_line", "line_number": 1},
                {"operation_type": "delete_line", "line_number": 99},
            ],
        }))
        print(agent.call("read_file", {"path": "src/hello.py"}))

        print("\n=== Demo completed successfully! ===")


if __name__ == "__main__":
    demonstrate_agent_usage()
