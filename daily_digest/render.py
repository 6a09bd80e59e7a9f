from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence

from .models import SECTION_NAMES, ArchiveEntry, Digest, FeedRecord

SITE_TITLE = "🎤 AI 语音日报"
WEEKDAYS = ("星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日")
SIDEBAR_DAYS = 10
MESSAGE_ITEMS = 3
MESSAGE_TITLE_CHARS = 40


@dataclass(frozen=True)
class SectionMeta:
    anchor: str
    heading: str
    nav: str
    short: str
    unit: str
    placeholder: str
    card_placeholder: str


SECTIONS: Dict[str, SectionMeta] = {
    "news": SectionMeta(
        anchor="ai-news",
        heading="📰 AI 前沿资讯",
        nav="📰 AI资讯",
        short="📰 AI 资讯",
        unit="条",
        placeholder="暂无更新",
        card_placeholder="_今日暂无更新_",
    ),
    "papers": SectionMeta(
        anchor="papers",
        heading="🎤 语音前沿论文",
        nav="🎤 语音论文",
        short="🎤 语音论文",
        unit="篇",
        placeholder="暂无新论文",
        card_placeholder="_今日暂无新论文_",
    ),
    "blogs": SectionMeta(
        anchor="blogs",
        heading="👥 关注博主动态",
        nav="👥 博主动态",
        short="👥 博主动态",
        unit="篇",
        placeholder="暂无更新",
        card_placeholder="_近期暂无更新_",
    ),
}

STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'PingFang SC', 'Hiragino Sans GB', sans-serif;
      line-height: 1.8;
      color: #333;
      background: linear-gradient(135deg, #f5f7fa 0%, #c3cfe2 100%);
      min-height: 100vh;
    }
    .container { max-width: 800px; margin: 0 auto; padding: 20px; }
    header {
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      color: white;
      padding: 50px 30px;
      text-align: center;
      border-radius: 20px;
      margin-bottom: 30px;
      box-shadow: 0 10px 40px rgba(102, 126, 234, 0.3);
    }
    h1 { font-size: 2.2em; margin-bottom: 10px; }
    .subtitle { opacity: 0.9; font-size: 1em; }
    section {
      background: white;
      border-radius: 16px;
      padding: 30px;
      margin-bottom: 25px;
      box-shadow: 0 4px 20px rgba(0,0,0,0.08);
    }
    h2 {
      font-size: 1.4em;
      margin-bottom: 20px;
      padding-bottom: 12px;
      border-bottom: 3px solid #667eea;
      display: inline-block;
    }
    .item { padding: 18px 0; border-bottom: 1px solid #eee; }
    .item:last-child { border-bottom: none; }
    .item h3 { margin-bottom: 10px; font-size: 1.05em; font-weight: 600; line-height: 1.5; }
    .item h3 a { color: #333; text-decoration: none; }
    .item h3 a:hover { color: #667eea; }
    .meta { font-size: 0.85em; color: #888; margin-bottom: 10px; }
    .summary {
      color: #555;
      font-size: 0.95em;
      line-height: 1.7;
      background: #f8f9fa;
      padding: 12px 15px;
      border-radius: 8px;
      margin-top: 10px;
    }
    .tag {
      display: inline-block;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      color: white;
      padding: 3px 10px;
      border-radius: 20px;
      font-size: 0.75em;
      margin-right: 8px;
    }
    .pdf-link {
      display: inline-block;
      color: #667eea;
      font-size: 0.85em;
      margin-top: 8px;
      text-decoration: none;
      padding: 5px 12px;
      background: #f0f3ff;
      border-radius: 6px;
    }
    .pdf-link:hover { background: #667eea; color: white; }
    nav {
      background: white;
      border-radius: 12px;
      padding: 15px 25px;
      margin-bottom: 25px;
      box-shadow: 0 4px 20px rgba(0,0,0,0.08);
      text-align: center;
    }
    nav a { color: #667eea; text-decoration: none; margin: 0 15px; font-weight: 500; }
    nav a:hover { color: #764ba2; }
    .sidebar {
      position: fixed;
      right: 20px;
      top: 50%;
      transform: translateY(-50%);
      background: white;
      border-radius: 12px;
      padding: 15px;
      box-shadow: 0 4px 20px rgba(0,0,0,0.1);
      max-height: 60vh;
      overflow-y: auto;
      min-width: 140px;
    }
    .sidebar h4 { color: #667eea; font-size: 0.9em; margin-bottom: 10px; }
    .sidebar a { display: block; color: #666; text-decoration: none; padding: 6px 10px; border-radius: 6px; font-size: 0.85em; }
    .sidebar a.active { background: #667eea; color: white; }
    @media (max-width: 1200px) { .sidebar { display: none; } }
    footer { text-align: center; color: #888; font-size: 0.85em; padding: 30px; }
    .count {
      background: #667eea;
      color: white;
      padding: 2px 8px;
      border-radius: 10px;
      font-size: 0.8em;
      margin-left: 8px;
    }
    .day-item {
      padding: 18px;
      border-bottom: 1px solid #f0f0f0;
      display: flex;
      justify-content: space-between;
      align-items: center;
    }
    .day-item:last-child { border-bottom: none; }
    .day-item a { color: #333; text-decoration: none; font-size: 1.1em; font-weight: 500; }
    .stats { color: #888; font-size: 0.9em; }
    .stats span { margin-left: 10px; }
    .empty { color: #888; text-align: center; padding: 20px; }
"""


def esc(value: Optional[str]) -> str:
    return html.escape(value or "", quote=True)


def format_date(value: date) -> str:
    """2026-10-19 → 2026年10月19日星期一"""
    return f"{value.year}年{value.month}月{value.day}日{WEEKDAYS[value.weekday()]}"


def format_day(record: FeedRecord) -> str:
    published_at = record.published_at
    if published_at is None:
        return record.published
    return f"{published_at.year}/{published_at.month}/{published_at.day}"


def truncate(text: Optional[str], max_len: int) -> str:
    if not text:
        return ""
    return text[:max_len] + "..." if len(text) > max_len else text


def _summary_block(text: str) -> str:
    return f'<div class="summary">{esc(text)}</div>' if text else ""


def _news_item(r: FeedRecord) -> str:
    return f"""
        <div class="item">
          <h3><a href="{esc(r.link)}" target="_blank">{esc(r.display_title)}</a></h3>
          <div class="meta">📌 {esc(r.source)}</div>
          {_summary_block(r.display_summary)}
        </div>"""


def _paper_item(r: FeedRecord) -> str:
    authors = ", ".join(r.authors)
    pdf = f'<a href="{esc(r.pdf)}" target="_blank" class="pdf-link">📄 下载 PDF</a>' if r.pdf else ""
    return f"""
        <div class="item">
          <h3><a href="{esc(r.link)}" target="_blank">{esc(r.title)}</a></h3>
          <div class="meta">
            <span class="tag">{esc(r.category)}</span>
            👤 {esc(authors)}
          </div>
          {_summary_block(r.display_summary)}
          {pdf}
        </div>"""


def _blog_item(r: FeedRecord) -> str:
    return f"""
        <div class="item">
          <h3><a href="{esc(r.link)}" target="_blank">{esc(r.title)}</a></h3>
          <div class="meta">
            ✍️ {esc(r.source)} ·
            📅 {esc(format_day(r))}
          </div>
          {_summary_block(r.summary)}
        </div>"""


_ITEM_RENDERERS: Dict[str, Callable[[FeedRecord], str]] = {
    "news": _news_item,
    "papers": _paper_item,
    "blogs": _blog_item,
}


def _html_section(digest: Digest, name: str) -> str:
    meta = SECTIONS[name]
    records = list(digest.section(name))
    if records:
        body = "".join(_ITEM_RENDERERS[name](r) for r in records)
    else:
        body = f'<p class="empty">{meta.placeholder}</p>'
    note = ""
    if name == "papers":
        note = '<p class="meta">来源: arXiv eess.AS, cs.SD（标题保留英文原文）</p>'
    return f"""
    <section id="{meta.anchor}">
      <h2>{meta.heading} <span class="count">{len(records)}</span></h2>
      {note}{body}
    </section>"""


def _sidebar(digest: Digest, history: Sequence[ArchiveEntry]) -> str:
    if not history:
        return ""
    current = f"{digest.date.isoformat()}.html"
    links = "".join(
        f'\n    <a href="{esc(h.filename)}" class="{"active" if h.filename == current else ""}">{esc(format_date(date.fromisoformat(h.date)))}</a>'
        for h in history[:SIDEBAR_DAYS]
    )
    return f"""
  <div class="sidebar">
    <h4>📅 历史日报</h4>{links}
  </div>"""


def render_html(
    digest: Digest,
    history: Sequence[ArchiveEntry] = (),
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the day page for `digest`, with a sidebar of recent archive days."""
    date_str = format_date(digest.date)
    generated_at = generated_at or datetime.now()
    nav = "\n      ".join(f'<a href="#{SECTIONS[n].anchor}">{SECTIONS[n].nav}</a>' for n in SECTION_NAMES)
    sections = "".join(_html_section(digest, n) for n in SECTION_NAMES)
    return f"""<!DOCTYPE html>
<html lang="zh-CN">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>AI 语音日报 - {date_str}</title>
  <style>{STYLE}  </style>
</head>
<body>
  <div class="container">
    <header>
      <h1>{SITE_TITLE}</h1>
      <p class="subtitle">{date_str}</p>
    </header>

    <nav>
      {nav}
      <a href="index.html">📅 历史</a>
    </nav>
{sections}

    <footer>
      <p>🤖 本日报由 AI 自动生成，仅供参考</p>
      <p>更新时间: {generated_at:%Y-%m-%d %H:%M:%S}</p>
    </footer>
  </div>
{_sidebar(digest, history)}
</body>
</html>
"""


def render_index(history: Sequence[ArchiveEntry]) -> str:
    """Render the archive page listing every persisted day with its counts."""
    if history:
        rows = "".join(
            f"""
        <div class="day-item">
          <a href="{esc(h.filename)}">{esc(format_date(date.fromisoformat(h.date)))}</a>
          <div class="stats">
            <span>📰 {h.counts.get('news', 0)}</span>
            <span>📄 {h.counts.get('papers', 0)}</span>
            <span>📝 {h.counts.get('blogs', 0)}</span>
          </div>
        </div>"""
            for h in history
        )
    else:
        rows = '<p class="empty">暂无历史日报</p>'
    return f"""<!DOCTYPE html>
<html lang="zh-CN">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>AI 语音日报 - 历史存档</title>
  <style>{STYLE}  </style>
</head>
<body>
  <div class="container">
    <header>
      <h1>{SITE_TITLE}</h1>
      <p>历史存档</p>
    </header>
    <section>
      <h2>📅 历史日报</h2>{rows}
    </section>
  </div>
</body>
</html>
"""


def _markdown_item(name: str, r: FeedRecord) -> List[str]:
    lines = [f"### [{r.display_title if name == 'news' else r.title}]({r.link})"]
    if name == "papers":
        lines.append(f"`{r.category}` 👤 {', '.join(r.authors)}")
    elif name == "blogs":
        lines.append(f"✍️ {r.source} · 📅 {format_day(r)}")
    else:
        lines.append(f"📌 {r.source}")
    summary = r.summary if name == "blogs" else r.display_summary
    if summary:
        lines.append("")
        lines.append(f"> {summary}")
    if r.pdf:
        lines.append("")
        lines.append(f"[📄 下载 PDF]({r.pdf})")
    lines.append("")
    return lines


def render_markdown(digest: Digest) -> str:
    """Full Markdown rendition of the day page."""
    lines = [f"# {SITE_TITLE} - {format_date(digest.date)}", ""]
    for name in SECTION_NAMES:
        meta = SECTIONS[name]
        records = list(digest.section(name))
        lines.append(f"## {meta.heading} ({len(records)})")
        lines.append("")
        if not records:
            lines.append(f"_{meta.placeholder}_")
            lines.append("")
            continue
        for r in records:
            lines.extend(_markdown_item(name, r))
    lines.append("---")
    lines.append("🤖 本日报由 AI 自动生成，仅供参考")
    return "\n".join(lines) + "\n"


def render_message(digest: Digest) -> str:
    """Short Markdown chat message: counts plus the first few titles per section."""
    parts = [f"🎤 **AI 语音日报**\n📅 {digest.date.isoformat()}"]
    for name in SECTION_NAMES:
        meta = SECTIONS[name]
        records = list(digest.section(name))
        block = f"**{meta.short}** ({len(records)} {meta.unit})\n"
        if records:
            block += "\n".join(
                f"{i}. {truncate(r.title, MESSAGE_TITLE_CHARS)}"
                for i, r in enumerate(records[:MESSAGE_ITEMS], start=1)
            )
            if len(records) > MESSAGE_ITEMS:
                block += f"\n_...还有 {len(records) - MESSAGE_ITEMS} {meta.unit}_"
        else:
            block += f"_{meta.placeholder}_"
        parts.append(block)
    return "\n\n".join(parts)
