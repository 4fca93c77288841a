"""Prompt text shared by all providers."""

from string import Template
from typing import Optional, Sequence

SYSTEM_INSTRUCTION = (
    "You are a professional academic writer. You specialise in LaTeX, TikZ "
    "and experimental data analysis. You are meticulous about reading every "
    "page of data you are given."
)

_INSTRUCTIONS = Template("""
You are an expert academic laboratory assistant. Write a complete, \
high-quality laboratory report in LaTeX.

## Inputs

1. LaTeX template: the .tex skeleton reproduced at the end of this message.
2. Experiment guide: the lab manual attached above (PDF or text). It holds \
the theory, the procedure and the diagrams.
3. Data images: $image_count image(s) of handwritten measurements are \
attached. Files: [$image_list].

## Rules

### LaTeX formatting and packages
- Fill in the provided template; keep its structure and preamble.
- The report relies on the tikz, pgfplots, float and booktabs packages. \
Add any of them that the preamble is missing.
- Write strictly valid tabular environments. Use booktabs rules \
(\\toprule, \\midrule, \\bottomrule) instead of \\hline.
- Output ONLY the raw LaTeX source. No Markdown, no code fences, no \
commentary before or after the document.

### Paraphrasing
- Rewrite the theory and the procedure in your own words; never copy the \
guide verbatim.
- Narrate the procedure in the past tense and the passive voice \
(e.g. "The circuit was connected..." rather than "Connect the circuit").

### Data from every image
- Extract data from ALL $image_count images, not only the first one.
- Tables frequently continue from one photo to the next. When a table is \
split across images, or later images add rows to an earlier table, merge \
them into a single table in the report.
- Consolidate every value into the report's data tables.
- Carry out all calculations (averages, uncertainties, slopes, fits) and \
write them up in the analysis section.

### Figures from the guide
- Circuit diagrams, optical set-ups and simple geometric figures: redraw \
them with TikZ inside the document. This is preferred over a placeholder.
- Photographs or screenshots that cannot be drawn with TikZ: insert exactly \
this placeholder in their place:
  \\begin{figure}[H] \\centering \\fbox{\\parbox{0.8\\textwidth}{\\centering \
\\vspace{2cm} [IMAGE PLACEHOLDER: Please insert the '$guide_name' screenshot here] \
\\vspace{2cm}}} \\caption{Experimental Setup} \\end{figure}

## Template to fill
""")


def build_instruction(template: str, guide_name: Optional[str], image_names: Sequence[str]) -> str:
    """Build the instruction block that closes every report request.

    The image count and the numbered file list are spelled out so the model
    attends to every attachment, and the template text is appended verbatim.
    """
    image_list = ", ".join(f"Image {i}: {name}" for i, name in enumerate(image_names, start=1))
    header = _INSTRUCTIONS.safe_substitute(
        image_count=len(image_names),
        image_list=image_list,
        guide_name=guide_name or "guide",
    )
    return header + template
