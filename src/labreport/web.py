"""Browser wizard served by Flask.

One in-process :class:`WizardSession` backs the pages; the app is meant to be
run locally by a single user (``labreport serve``).
"""

import logging
from typing import Callable, Optional

from flask import Flask, Response, abort, redirect, render_template_string, request, url_for

from labreport.config import Config
from labreport.download import REPORT_FILENAME, REPORT_MEDIA_TYPE
from labreport.files import FileSource
from labreport.providers.base import BaseProvider
from labreport.report import build_provider
from labreport.wizard import WizardSession, WizardStep

logger = logging.getLogger(__name__)

STEP_TITLES = {
    WizardStep.TEMPLATE: "Template",
    WizardStep.GUIDE: "Guide",
    WizardStep.DATA: "Data",
    WizardStep.GENERATE: "Generate",
}

PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>LabReport AI</title>
<style>
  body { font-family: system-ui, sans-serif; background: #f9fafb; color: #111827; margin: 0; }
  header { background: #fff; border-bottom: 1px solid #e5e7eb; padding: 1rem 2rem; font-weight: 700; color: #4f46e5; }
  main { max-width: 48rem; margin: 2rem auto; background: #fff; border-radius: 1rem; padding: 2rem; box-shadow: 0 10px 25px rgba(0,0,0,.06); }
  ol.steps { display: flex; gap: 1rem; list-style: none; padding: 0; }
  ol.steps li { flex: 1; text-align: center; color: #9ca3af; }
  ol.steps li.current { color: #4f46e5; font-weight: 600; }
  ol.steps li.done button { color: #059669; background: none; border: 0; cursor: pointer; text-decoration: underline; }
  .banner { background: #fef2f2; color: #b91c1c; border: 1px solid #fecaca; border-radius: .5rem; padding: 1rem; margin: 1rem 0; }
  .files li { margin: .25rem 0; }
  textarea { width: 100%; min-height: 24rem; font-family: monospace; background: #111827; color: #f3f4f6; border-radius: .5rem; padding: 1rem; }
  nav { display: flex; justify-content: space-between; margin-top: 2rem; }
  button { padding: .5rem 1.25rem; border-radius: .5rem; border: 1px solid #d1d5db; background: #fff; cursor: pointer; }
  button.primary { background: #4f46e5; color: #fff; border-color: #4f46e5; }
  button:disabled { opacity: .4; cursor: not-allowed; }
</style>
</head>
<body>
<header>LabReport AI</header>
<main>
  <ol class="steps">
  {% for s in steps %}
    {% if wizard.is_completed(s) %}
    <li class="done"><form method="post" action="{{ url_for('jump', name=s.value) }}"><button>{{ titles[s] }}</button></form></li>
    {% else %}
    <li class="{{ 'current' if s == wizard.step else '' }}">{{ titles[s] }}</li>
    {% endif %}
  {% endfor %}
  </ol>

  {% if wizard.error %}
  <div class="banner">
    <strong>Error</strong>
    <p>{{ wizard.error }}</p>
    <form method="post" action="{{ url_for('dismiss') }}"><button>Dismiss</button></form>
  </div>
  {% endif %}

  {% if wizard.step.value == 'template' %}
    <h2>Upload LaTeX Template</h2>
    <p>Upload the .tex file containing the structure of the report.</p>
    <form method="post" action="{{ url_for('upload_template') }}" enctype="multipart/form-data">
      <input type="file" name="file" accept=".tex,.txt"> <button>Upload</button>
    </form>
    {% if wizard.template_name %}<ul class="files"><li>{{ wizard.template_name }}</li></ul>{% endif %}
  {% elif wizard.step.value == 'guide' %}
    <h2>Upload Experiment Guide</h2>
    <p>Upload the lab manual. PDF is recommended so the model sees the diagrams.</p>
    <form method="post" action="{{ url_for('upload_guide') }}" enctype="multipart/form-data">
      <input type="file" name="file" accept=".pdf,.txt,.md,.tex"> <button>Upload</button>
    </form>
    {% if wizard.config.guide %}<ul class="files"><li>{{ wizard.config.guide.name }}</li></ul>{% endif %}
  {% elif wizard.step.value == 'data' %}
    <h2>Upload Data Sheets</h2>
    <p>Add every photo of your handwritten data. Tables may continue across photos.</p>
    <form method="post" action="{{ url_for('upload_images') }}" enctype="multipart/form-data">
      <input type="file" name="files" accept="image/*" multiple> <button>Add photos</button>
    </form>
    <ul class="files">
    {% for image in wizard.config.images %}
      <li>{{ loop.index }}. {{ image.name }}
        <form style="display:inline" method="post" action="{{ url_for('remove_image', index=loop.index0) }}"><button>Remove</button></form>
      </li>
    {% endfor %}
    </ul>
  {% else %}
    <h2>Generate Report</h2>
    {% if wizard.busy %}
      <p><strong>Analyzing handwriting...</strong> Reading your data sheets and writing LaTeX.</p>
    {% elif wizard.result and wizard.result.ok %}
      <p><a href="{{ url_for('download') }}">Download {{ filename }}</a></p>
      <textarea readonly>{{ wizard.result.latex }}</textarea>
    {% else %}
      <p>Ready to process:
        <strong>{{ '1 Template' if review.has_template else 'No Template' }}</strong>,
        <strong>{{ '1 Guide' if review.guide_name else 'No Guide' }}</strong>{% if review.guide_pages %} ({{ review.guide_pages }} pages){% endif %},
        <strong>{{ review.image_count }} Images</strong>.
      </p>
      <form method="post" action="{{ url_for('generate') }}"
            onsubmit="this.querySelector('button').disabled = true; this.querySelector('button').textContent = 'Analyzing handwriting...';">
        <button class="primary">Start Generation</button>
      </form>
      <p><small>This can take up to 30 seconds.</small></p>
    {% endif %}
  {% endif %}

  {% if wizard.step.value != 'generate' %}
  <nav>
    <form method="post" action="{{ url_for('back') }}"><button {{ 'disabled' if wizard.step.value == 'template' else '' }}>Back</button></form>
    <form method="post" action="{{ url_for('next_step') }}"><button class="primary" {{ '' if wizard.can_advance() else 'disabled' }}>Next</button></form>
  </nav>
  {% endif %}
</main>
</body>
</html>
"""


def create_app(
    config: Config,
    provider_factory: Callable[[Config], BaseProvider] = build_provider,
    session: Optional[WizardSession] = None,
) -> Flask:
    """Build the wizard app around a single session.

    A fresh provider is built for every generation so its async client is
    bound to the event loop of that request.
    """
    app = Flask(__name__)
    wizard = session if session is not None else WizardSession()
    app.extensions["labreport.session"] = wizard

    def _home():
        return redirect(url_for("index"))

    def _picked(field: str) -> list[FileSource]:
        return [
            FileSource(name=f.filename, mime_type=f.mimetype or "", read=f.read)
            for f in request.files.getlist(field)
            if f.filename
        ]

    @app.route("/")
    def index():
        review = wizard.review() if wizard.step == WizardStep.GENERATE else None
        return render_template_string(
            PAGE,
            wizard=wizard,
            steps=list(WizardStep),
            titles=STEP_TITLES,
            review=review,
            filename=REPORT_FILENAME,
        )

    @app.route("/template", methods=["POST"])
    async def upload_template():
        picked = _picked("file")
        if picked:
            await wizard.load_template(picked[0])
        return _home()

    @app.route("/guide", methods=["POST"])
    async def upload_guide():
        picked = _picked("file")
        if picked:
            await wizard.load_guide(picked[0])
        return _home()

    @app.route("/images", methods=["POST"])
    async def upload_images():
        picked = _picked("files")
        added = await wizard.add_images(picked)
        logger.info("Added %d of %d photo(s)", added, len(picked))
        return _home()

    @app.route("/images/<int:index>/delete", methods=["POST"])
    def remove_image(index: int):
        try:
            wizard.remove_image(index)
        except IndexError:
            abort(404)
        return _home()

    @app.route("/next", methods=["POST"])
    def next_step():
        wizard.advance()
        return _home()

    @app.route("/back", methods=["POST"])
    def back():
        wizard.retreat()
        return _home()

    @app.route("/step/<name>", methods=["POST"])
    def jump(name: str):
        try:
            step = WizardStep(name)
        except ValueError:
            abort(404)
        wizard.jump_to(step)
        return _home()

    @app.route("/generate", methods=["POST"])
    async def generate():
        if wizard.busy:
            logger.info("Generation already running; ignoring request")
        elif wizard.step == WizardStep.GENERATE:
            await wizard.generate(provider_factory(config), temperature=config.temperature)
        return _home()

    @app.route("/dismiss", methods=["POST"])
    def dismiss():
        wizard.dismiss_error()
        return _home()

    @app.route("/download")
    def download():
        result = wizard.result
        if result is None or not result.ok:
            abort(404)
        return Response(
            result.latex,
            mimetype=REPORT_MEDIA_TYPE,
            headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
        )

    return app
