"""Code review prompt tool — pure template expansion."""
from typing import List, Optional

from ...config import Settings
from ...contracts import Param, text_output_contract
from ..registry import ToolDescriptor

DESCRIPTION = "Takes a piece of code and builds a prompt for reviewing it."

REVIEW_TEMPLATE = """Please review the following code.

## Code
```{language}
{code}
```

## Review checklist
Please examine the code with these points in mind:

1. **Code quality**
   - Readability and clarity
   - Naming conventions
   - Structure and organization

2. **Functionality**
   - Correctness of the logic
   - Edge case handling
   - Error handling

3. **Performance**
   - Algorithmic efficiency
   - Unnecessary work or duplicated code
   - Memory usage

4. **Security**
   - Potential vulnerabilities
   - Input validation and sanitization
   - Exposure of sensitive data

5. **Maintainability**
   - Reusability
   - Testability
   - Documentation and comments
{focus_section}
## Review format
Please structure the review as follows:

### 👍 What works well
- [positive feedback]

### 🔍 What to improve
- [areas that need work, and why]

### 💡 Suggestions
- [concrete improvements]

### ⚠️ Potential problems
- [things to watch out for]

Thank you!"""


def build_review_prompt(code: str, language: Optional[str] = None, focus_areas: Optional[List[str]] = None) -> str:
    focus_section = ""
    if focus_areas:
        numbered = "\n".join(f"{i}. {area}" for i, area in enumerate(focus_areas, start=1))
        focus_section = f"\n## Focus areas\n{numbered}\n"
    return REVIEW_TEMPLATE.format(language=language or "", code=code, focus_section=focus_section)


async def code_review_prompt(code: str, language: Optional[str] = None, focusAreas: Optional[List[str]] = None) -> str:
    return build_review_prompt(code, language, focusAreas)


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="code-review-prompt",
        description=DESCRIPTION,
        params=(
            Param("code", description="code to review"),
            Param("language", required=False, description="programming language (e.g. TypeScript, Python)"),
            Param(
                "focusAreas",
                type="array",
                items=Param("area"),
                required=False,
                description='review areas to focus on (e.g. ["performance", "security"])',
            ),
        ),
        handler=code_review_prompt,
        output=tuple(text_output_contract("code review prompt")),
    )
