def inject_theme() -> str:
    return """
<style>
:root {
  --line: rgba(15,23,42,0.10);
  --ink: #0f172a;
  --muted: #64748b;
}
.stApp {
  background: linear-gradient(180deg, #f8fafc 0%, #ffffff 40%);
}
.block-container {
  padding-top: 1.2rem;
  max-width: 1100px;
}
.hero {
  padding: 1.1rem 1.4rem;
  border-left: 4px solid #1565c0;
  border-radius: 12px;
  background: #ffffff;
  box-shadow: 0 1px 3px var(--line);
  margin-bottom: 1rem;
}
.hero h2 { color: var(--ink); }
.hero p { color: var(--muted); }
.ratio-card {
  border: 1px solid var(--line);
  border-radius: 14px;
  background: #ffffff;
  padding: 0.8rem 1rem;
  margin-bottom: 0.6rem;
}
.ratio-card .title { font-size: 0.75rem; font-weight: 700; text-transform: uppercase; color: var(--muted); }
.ratio-card .value { font-size: 1.5rem; font-weight: 800; color: var(--ink); }
.ratio-card .insight { font-size: 0.82rem; color: #475569; margin-top: 0.3rem; }
.badge {
  display: inline-block;
  margin-left: 0.4rem;
  border-radius: 6px;
  padding: 0.05rem 0.5rem;
  font-size: 0.72rem;
  font-weight: 700;
  vertical-align: middle;
}
.badge-good { background: #dcfce7; color: #15803d; }
.badge-warn { background: #fef3c7; color: #b45309; }
@media (max-width: 900px) {
  .ratio-card .value { font-size: 1.2rem; }
}
</style>
"""
