"""Embedded print template for the SOW PDF export.

Placeholders are ``{{NAME}}`` tokens resolved in a single pass by
src.rendering.print_template. Every token below must receive a value.
"""

PRINT_TEMPLATE_TOKENS = (
    "PAGE_CSS",
    "LOGO_BLOCK",
    "PROJECT_TITLE",
    "CLIENT_LINE",
    "CLIENT_NAME",
    "PROJECT_OVERVIEW_SECTION",
    "DOCUMENT_DATE",
    "SCOPE_ROWS",
    "SUMMARY_ROWS",
    "GRAND_TOTAL",
    "CURRENCY",
    "BUDGET_NOTES_SECTION",
)

SOW_PRINT_TEMPLATE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{PROJECT_TITLE}}</title>
<style>
  {{PAGE_CSS}}
  * { box-sizing: border-box; }
  body {
    font-family: "Helvetica Neue", Helvetica, Arial, sans-serif;
    font-size: 10pt;
    line-height: 1.45;
    color: #1a1a1a;
    margin: 0;
    -webkit-print-color-adjust: exact;
    print-color-adjust: exact;
  }
  .header { text-align: center; padding: 24px 0 16px; border-bottom: 3px solid #0b1f3a; }
  .header img.logo { max-width: 180px; max-height: 70px; margin-bottom: 12px; }
  .header h1 { font-size: 24pt; font-weight: 300; margin: 0 0 6px; }
  .header .client-line { font-size: 11pt; color: #6b7280; margin: 0; }
  .meta { display: flex; justify-content: space-between; margin: 18px 0; font-size: 9.5pt; }
  .meta .label { font-weight: bold; color: #0b1f3a; }
  h2 { font-size: 13pt; color: #0b1f3a; border-bottom: 1px solid #d1d5db; padding-bottom: 4px; margin-top: 22px; }
  table { width: 100%; border-collapse: collapse; margin-top: 8px; page-break-inside: auto; }
  tr { page-break-inside: avoid; }
  th { background: #0b1f3a; color: #ffffff; text-align: left; padding: 7px 8px; font-size: 9pt; text-transform: uppercase; }
  td { border-bottom: 1px solid #e5e7eb; padding: 6px 8px; vertical-align: top; }
  td.num, th.num { text-align: right; white-space: nowrap; }
  .scope-section-header { background: #e8eef7; font-weight: bold; font-size: 11pt; color: #0b1f3a; }
  .description-row { font-style: italic; color: #374151; }
  .deliverables-block h4 { margin: 4px 0; font-size: 9.5pt; }
  .deliverables-block ul { margin: 2px 0 4px 18px; padding: 0; }
  .summary-table .grand-total td { font-weight: bold; border-top: 2px solid #0b1f3a; background: #f3f4f6; }
  .grand-total-banner { margin-top: 18px; text-align: right; font-size: 14pt; }
  .grand-total-banner .amount { font-weight: bold; color: #0b1f3a; }
  .budget-notes { margin-top: 18px; padding: 10px 12px; background: #f9fafb; border-left: 3px solid #0b1f3a; }
  .footer-note { margin-top: 28px; font-size: 8.5pt; color: #6b7280; text-align: center; }
</style>
</head>
<body>
  <div class="header">
    {{LOGO_BLOCK}}
    <h1>{{PROJECT_TITLE}}</h1>
    <p class="client-line">{{CLIENT_LINE}}</p>
  </div>

  <div class="meta">
    <div><span class="label">Prepared for:</span> {{CLIENT_NAME}}</div>
    <div><span class="label">Date:</span> {{DOCUMENT_DATE}}</div>
  </div>

{{PROJECT_OVERVIEW_SECTION}}

  <h2>Scope of Work</h2>
  <table class="scope-table">
    <thead>
      <tr>
        <th>Task / Description</th>
        <th>Role</th>
        <th class="num">Hours</th>
        <th class="num">Cost (inc. tax)</th>
      </tr>
    </thead>
    <tbody>
{{SCOPE_ROWS}}
    </tbody>
  </table>

  <h2>Summary</h2>
  <table class="summary-table">
    <thead>
      <tr>
        <th>Scope</th>
        <th class="num">Hours</th>
        <th class="num">Cost (inc. tax)</th>
      </tr>
    </thead>
    <tbody>
{{SUMMARY_ROWS}}
    </tbody>
  </table>

  <div class="grand-total-banner">
    Grand Total: <span class="amount">{{GRAND_TOTAL}}</span> {{CURRENCY}}
  </div>
{{BUDGET_NOTES_SECTION}}
  <p class="footer-note">This Statement of Work is valid for 30 days from the date above.</p>
</body>
</html>
"""
