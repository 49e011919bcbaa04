"""
Calculation Report Generator for masstimber

Generates a printable HTML calculation package with:
- Building summary and resolved grid
- Member schedule with utilization status
- Step-by-step calculation trail per member
- Validation messages and timber quantities
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from jinja2 import BaseLoader, Environment, select_autoescape

from ..core.data_models import SizingResult, StructureResult


# =============================================================================
# CSS STYLES
# =============================================================================

CSS_STYLES = '''
:root {
    --primary: #5b3a1a;
    --accent: #a0642c;
    --success: #38a169;
    --warning: #d69e2e;
    --danger: #e53e3e;
    --gray-200: #edf2f7;
    --gray-600: #718096;
}
body { font-family: "Inter", Arial, sans-serif; color: #1a202c; margin: 2rem; }
h1 { color: var(--primary); margin-bottom: 0.2rem; }
h2 { color: var(--accent); border-bottom: 2px solid var(--gray-200); padding-bottom: 0.3rem; }
table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
th, td { border: 1px solid var(--gray-200); padding: 0.4rem 0.6rem; text-align: left; }
th { background: var(--gray-200); }
.meta { color: var(--gray-600); }
.status-badge { font-weight: 600; padding: 0.1rem 0.5rem; border-radius: 4px; color: white; }
.pass { background: var(--success); }
.warn { background: var(--warning); }
.fail { background: var(--danger); }
.calc pre { white-space: pre-wrap; margin: 0; }
.messages li { margin-bottom: 0.2rem; }
'''


HTML_TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<style>{{ css_styles|safe }}</style>
</head>
<body>
<h1>{{ title }}</h1>
<p class="meta">Generated {{ generation_date }} &middot; Overall status: <strong>{{ overall_status }}</strong></p>

<h2>Building</h2>
<table>
  <tr><th>Footprint</th><td>{{ building.length }} m × {{ building.width }} m</td></tr>
  <tr><th>Bays</th><td>{{ building.bays }}</td></tr>
  <tr><th>Joist direction</th><td>{{ building.joist_direction }}</td></tr>
  <tr><th>Floors</th><td>{{ building.floors }} @ {{ building.floor_height }} m</td></tr>
  <tr><th>Area load</th><td>{{ building.load }} kPa</td></tr>
  <tr><th>Fire rating</th><td>{{ building.fire_rating }}</td></tr>
</table>

<h2>Member Schedule</h2>
<table>
  <tr>
    <th>Member</th><th>Size (mm)</th><th>Span (m)</th><th>Governing</th>
    <th>Utilization</th><th>Status</th>
  </tr>
  {% for member in members %}
  <tr>
    <td>{{ member.name }}</td>
    <td>{{ member.size }}</td>
    <td>{{ member.span }}</td>
    <td>{{ member.governing }}</td>
    <td>{{ member.utilization }}</td>
    <td><span class="status-badge {{ member.status_class }}">{{ member.status }}</span></td>
  </tr>
  {% endfor %}
</table>

<h2>Validation</h2>
{% if validation.valid %}
<p><span class="status-badge pass">VALID</span></p>
{% else %}
<p><span class="status-badge fail">INVALID</span></p>
{% endif %}
{% if validation.messages or validation.notices %}
<ul class="messages">
  {% for message in validation.messages %}<li><strong>{{ message }}</strong></li>{% endfor %}
  {% for notice in validation.notices %}<li>{{ notice }}</li>{% endfor %}
</ul>
{% endif %}

<h2>Quantities</h2>
<table>
  <tr><th>Member</th><th>Count</th><th>Length (m)</th><th>Volume (m³)</th><th>Mass (kg)</th></tr>
  {% for item in quantities.rows %}
  <tr>
    <td>{{ item.label }}</td><td>{{ item.count }}</td><td>{{ item.length }}</td>
    <td>{{ item.volume }}</td><td>{{ item.mass }}</td>
  </tr>
  {% endfor %}
  <tr><th>Total</th><td></td><td></td><th>{{ quantities.total_volume }}</th><th>{{ quantities.total_mass }}</th></tr>
</table>

<h2>Calculations</h2>
{% for member in members %}
<h3>{{ member.name }} &middot; {{ member.size }} mm</h3>
<table class="calc">
  <tr><th>Step</th><th>Calculation</th><th>Reference</th></tr>
  {% for step in member.calculations %}
  <tr><td>{{ step.description }}</td><td><pre>{{ step.calculation }}</pre></td><td>{{ step.reference }}</td></tr>
  {% endfor %}
</table>
{% if member.warnings %}
<ul class="messages">{% for warning in member.warnings %}<li>{{ warning }}</li>{% endfor %}</ul>
{% endif %}
{% endfor %}
</body>
</html>
'''


class ReportGenerator:
    """
    HTML calculation report for a sized structure.
    """

    def __init__(self, result: StructureResult, title: str = "Mass Timber Member Sizing"):
        """Initialize with a structure result."""
        self.result = result
        self.title = title
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=select_autoescape(['html', 'xml'])
        )
        self.template = self.env.from_string(HTML_TEMPLATE)

    def _get_status_class(self, utilization: float) -> str:
        """Return CSS class based on utilization ratio."""
        if utilization > 1.0:
            return "fail"
        elif utilization > 0.85:
            return "warn"
        return "pass"

    def _get_status_text(self, utilization: float) -> str:
        if utilization > 1.0:
            return "FAIL"
        elif utilization > 0.85:
            return "WARN"
        return "OK"

    def _format_utilization(self, utilization: float) -> str:
        """Format utilization as percentage string."""
        return f"{utilization * 100:.0f}%"

    def _get_overall_status(self) -> str:
        if not self.result.validation.valid:
            return "REQUIRES REVIEW"
        max_util = max(member.utilization for member in self.result.members)
        if max_util > 1.0:
            return "REQUIRES REVIEW"
        elif max_util > 0.85:
            return "ACCEPTABLE"
        return "SATISFACTORY"

    def _build_member(self, member: SizingResult) -> Dict[str, Any]:
        return {
            'name': member.element_type,
            'size': f"{member.width_mm:.0f} × {member.depth_mm:.0f}",
            'span': f"{member.span_m:.2f}",
            'governing': member.governing_criterion.value,
            'utilization': self._format_utilization(member.utilization),
            'status': self._get_status_text(member.utilization),
            'status_class': self._get_status_class(member.utilization),
            'calculations': list(member.calculations),
            'warnings': list(member.warnings),
        }

    def _build_building(self) -> Dict[str, Any]:
        building = self.result.building
        layout = self.result.layout
        return {
            'length': f"{building.building_length_m:.2f}",
            'width': f"{building.building_width_m:.2f}",
            'bays': f"{layout.lengthwise_bays} × {layout.widthwise_bays}",
            'joist_direction': "lengthwise" if layout.joists_run_lengthwise else "widthwise",
            'floors': building.floors,
            'floor_height': f"{building.floor_height_m:.2f}",
            'load': f"{building.load_kpa:.2f}",
            'fire_rating': self.result.joist.fire_rating.value,
        }

    def _build_quantities(self) -> Dict[str, Any]:
        quantities = self.result.quantities
        rows: List[Dict[str, Any]] = [
            {
                'label': item.label,
                'count': item.count,
                'length': f"{item.total_length_m:.1f}",
                'volume': f"{item.volume_m3:.2f}",
                'mass': f"{item.mass_kg:.0f}",
            }
            for item in quantities.items
        ]
        return {
            'rows': rows,
            'total_volume': f"{quantities.total_volume_m3:.2f}",
            'total_mass': f"{quantities.total_mass_kg:.0f}",
        }

    def generate(self) -> str:
        """
        Generate the complete HTML report.

        Returns:
            Complete HTML string ready for rendering or saving
        """
        context = {
            'title': self.title,
            'css_styles': CSS_STYLES,
            'generation_date': datetime.now().strftime('%Y-%m-%d %H:%M'),
            'overall_status': self._get_overall_status(),
            'building': self._build_building(),
            'members': [self._build_member(member) for member in self.result.members],
            'validation': self.result.validation,
            'quantities': self._build_quantities(),
        }
        return self.template.render(**context)

    def save(self, filepath: str) -> str:
        """
        Generate and save the HTML report to a file.

        Returns:
            The filepath where the report was saved
        """
        html = self.generate()

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(html)

        return filepath


def generate_report(result: StructureResult, filepath: Optional[str] = None) -> str:
    """
    Convenience function to generate a report.

    Returns:
        HTML string if no filepath, otherwise the saved filepath
    """
    generator = ReportGenerator(result)

    if filepath:
        return generator.save(filepath)
    return generator.generate()
