"""
Dashboard page template (Jinja, rendered by app.index).
"""

DASHBOARD_HTML = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>GoldWatch</title>
<style>
  body { margin: 0; font-family: system-ui, sans-serif; background: #0f172a; color: #e2e8f0; display: flex; min-height: 100vh; }
  nav { width: 220px; background: #0b1222; border-right: 1px solid #1e293b; padding: 24px; display: flex; flex-direction: column; }
  nav h1 { color: #fff; font-size: 20px; margin: 0 0 32px; }
  nav h1 span { background: #f59e0b; color: #0f172a; padding: 2px 8px; border-radius: 6px; margin-right: 6px; }
  nav button { display: block; width: 100%; text-align: left; background: none; border: 0; color: #94a3b8; padding: 10px 12px; border-radius: 10px; cursor: pointer; font-size: 15px; }
  nav button.active { background: rgba(245, 158, 11, .1); color: #f59e0b; font-weight: 600; }
  .state { margin-top: auto; padding: 10px 12px; border-radius: 10px; font-size: 13px; }
  .state.on { background: rgba(34, 197, 94, .1); } .state.off { background: rgba(239, 68, 68, .1); }
  main { flex: 1; padding: 32px; }
  header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 24px; }
  header h2 { margin: 0; color: #fff; }
  .card { background: rgba(15, 23, 42, .6); border: 1px solid #1e293b; border-radius: 20px; padding: 20px; margin-bottom: 20px; }
  .grid { display: grid; grid-template-columns: 2fr 1fr; gap: 20px; }
  .row { display: grid; grid-template-columns: 1fr 1fr; gap: 20px; }
  .label { color: #64748b; font-size: 12px; text-transform: uppercase; letter-spacing: .05em; }
  .price { font-size: 34px; font-weight: 900; color: #fff; margin: 8px 0; }
  .muted { color: #64748b; font-size: 12px; }
  input { background: #1e293b; border: 1px solid #334155; color: #fff; border-radius: 12px; padding: 10px 12px; font-size: 16px; width: 100%; box-sizing: border-box; }
  .btn { background: #f59e0b; color: #0f172a; border: 0; border-radius: 12px; padding: 10px 18px; font-weight: 700; cursor: pointer; }
  .btn.stop { background: #ef4444; color: #fff; }
  .btn:disabled { opacity: .3; cursor: default; }
  .tab { display: none; } .tab.active { display: block; }
  .badge { padding: 2px 8px; border-radius: 6px; font-size: 12px; font-weight: 700; }
  .Bullish, .success { background: rgba(34, 197, 94, .2); color: #4ade80; }
  .Bearish, .failed { background: rgba(239, 68, 68, .2); color: #f87171; }
  .Neutral { background: rgba(100, 116, 139, .2); color: #94a3b8; }
  .log { display: flex; justify-content: space-between; align-items: center; }
  img.chart { width: 100%; border-radius: 12px; }
</style>
</head>
<body data-refresh="{{ refresh_ms }}" data-currency="{{ currency }}">
<nav>
  <h1><span>&#9650;</span>GoldWatch</h1>
  <button class="active" data-tab="dashboard">Dashboard</button>
  <button data-tab="settings">Settings</button>
  <button data-tab="logs">Alert Logs</button>
  <div id="state" class="state off">Monitoring Stopped</div>
</nav>
<main>
  <header>
    <div>
      <h2 id="title">Market Overview</h2>
      <div class="muted">Monitoring real-time {{ symbol }} prices via public financial APIs.</div>
    </div>
    <button id="toggle" class="btn">Start Real-Time Sync</button>
  </header>

  <section id="tab-dashboard" class="tab active">
    <div class="grid">
      <div>
        <div class="row">
          <div class="card">
            <div class="label">Current Price ({{ unit }})</div>
            <div class="price" id="price">---</div>
            <div class="muted" id="source">Source: Initializing...</div>
            <div class="muted" id="updated"></div>
            <div class="muted" id="change"></div>
          </div>
          <div class="card">
            <div class="label">Trigger Threshold ({{ currency }})</div>
            <div style="display:flex; gap:8px; margin-top:8px;">
              <input type="number" id="threshold" min="0" step="1000">
              <button class="btn" id="save-threshold">Set</button>
            </div>
            <div class="muted" style="margin-top:12px;">Auto-alert when price exceeds this value</div>
          </div>
        </div>
        <div class="card">
          <div style="display:flex; justify-content:space-between;">
            <strong>Historical Trend</strong>
            <span class="muted">Auto-updates every poll</span>
          </div>
          <img class="chart" id="chart" src="/api/chart.png" alt="Price chart">
        </div>
      </div>
      <div>
        <div class="card">
          <div style="display:flex; justify-content:space-between; align-items:center;">
            <strong>AI Insights</strong>
            <button class="btn" id="insight-btn" disabled>Analyze</button>
          </div>
          <div id="insight" class="muted" style="margin-top:16px;">Wait for live price data to analyze.</div>
        </div>
        <div class="card">
          <strong>Telegram Alerts</strong>
          <p class="muted" id="tg-state">Notifications disabled.</p>
          <button class="btn" data-goto="settings">Edit Telegram Settings</button>
        </div>
      </div>
    </div>
  </section>

  <section id="tab-settings" class="tab">
    <div class="card" style="max-width:640px;">
      <strong>Bot Configuration</strong>
      <p class="muted">Provide your Telegram credentials to enable notifications.</p>
      <div class="label">Bot API Token</div>
      <input type="password" id="bot-token" placeholder="Paste your bot token here...">
      <div class="label" style="margin-top:16px;">Target Chat ID</div>
      <input type="text" id="chat-id" placeholder="Enter your User ID or Group Chat ID...">
      <label style="display:block; margin:16px 0;"><input type="checkbox" id="tg-enabled" style="width:auto;"> Enable Notifications</label>
      <button class="btn" id="save-settings">Save</button>
      <button class="btn" id="test-telegram">Send Test Message</button>
      <p class="muted">To get your Chat ID, message <b>@userinfobot</b> on Telegram. To create a bot, talk to <b>@BotFather</b>.</p>
      <div class="muted" id="settings-msg"></div>
    </div>
  </section>

  <section id="tab-logs" class="tab">
    <div id="logs"></div>
  </section>
</main>
{% raw %}
<script>
const REFRESH_MS = Number(document.body.dataset.refresh);
const CURRENCY = document.body.dataset.currency;
const TITLES = {dashboard: 'Market Overview', settings: 'Telegram Integration', logs: 'Notification Logs'};
const fmt = v => CURRENCY + ' ' + Number(v).toLocaleString('id-ID', {maximumFractionDigits: 0});
const $ = id => document.getElementById(id);
let monitoring = false;
let thresholdDirty = false;

async function api(path, body) {
  const opts = body === undefined ? {} : {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body)};
  const res = await fetch(path, opts);
  return {status: res.status, data: await res.json()};
}

function showTab(name) {
  document.querySelectorAll('nav button').forEach(b => b.classList.toggle('active', b.dataset.tab === name));
  document.querySelectorAll('.tab').forEach(t => t.classList.toggle('active', t.id === 'tab-' + name));
  $('title').textContent = TITLES[name];
  if (name === 'logs') loadLogs();
  if (name === 'settings') loadSettings();
}

async function refresh() {
  const {data} = await api('/api/status');
  monitoring = data.monitoring;
  $('state').className = 'state ' + (monitoring ? 'on' : 'off');
  $('state').textContent = monitoring ? 'Live API Monitoring' : 'Monitoring Stopped';
  $('toggle').textContent = monitoring ? 'Stop Monitoring' : 'Start Real-Time Sync';
  $('toggle').className = 'btn' + (monitoring ? ' stop' : '');
  $('price').textContent = data.current_price ? fmt(data.current_price) : '---';
  $('source').textContent = 'Source: ' + data.source;
  $('updated').textContent = data.last_updated ? 'Last sync: ' + new Date(data.last_updated).toLocaleTimeString() : '';
  const h = data.history;
  $('change').textContent = h.count > 1 ? 'Window change: ' + (h.change_pct * 100).toFixed(2) + '% over ' + h.count + ' points' : '';
  if (!thresholdDirty) $('threshold').value = data.threshold;
  $('insight-btn').disabled = !data.current_price;
  $('tg-state').textContent = data.telegram_enabled
    ? 'Real-time synchronization active. You will receive an alert once the market hits your threshold.'
    : 'Notifications disabled.';
  $('chart').src = '/api/chart.png?t=' + Date.now();
}

function renderInsight(ins) {
  const box = $('insight');
  box.innerHTML = '';
  const head = document.createElement('div');
  head.innerHTML = 'Market Sentiment: <span class="badge ' + ins.sentiment + '"></span>';
  head.querySelector('span').textContent = ins.sentiment;
  const analysis = document.createElement('p');
  analysis.textContent = ins.analysis;
  const rec = document.createElement('p');
  rec.textContent = '"' + ins.recommendation + '"';
  rec.style.fontStyle = 'italic';
  box.append(head, analysis, rec);
}

async function loadLogs() {
  const {data} = await api('/api/logs');
  const box = $('logs');
  box.innerHTML = '';
  if (!data.logs.length) {
    box.innerHTML = '<div class="card"><strong>No Logs Yet</strong><p class="muted">History of price alerts will appear here after synchronization.</p></div>';
    return;
  }
  data.logs.forEach(log => {
    const row = document.createElement('div');
    row.className = 'card log';
    const text = document.createElement('div');
    text.innerHTML = '<div></div><div class="muted"></div>';
    text.children[0].textContent = log.message;
    text.children[1].textContent = log.timestamp;
    const badge = document.createElement('span');
    badge.className = 'badge ' + log.status;
    badge.textContent = log.status.toUpperCase();
    row.append(text, badge);
    box.append(row);
  });
}

async function loadSettings() {
  const {data} = await api('/api/settings');
  $('bot-token').value = '';
  $('bot-token').placeholder = data.telegram.bot_token || 'Paste your bot token here...';
  $('chat-id').value = data.telegram.chat_id;
  $('tg-enabled').checked = data.telegram.enabled;
}

document.querySelectorAll('nav button').forEach(b => b.addEventListener('click', () => showTab(b.dataset.tab)));
document.querySelectorAll('[data-goto]').forEach(b => b.addEventListener('click', () => showTab(b.dataset.goto)));
$('toggle').addEventListener('click', async () => {
  await api(monitoring ? '/api/monitor/stop' : '/api/monitor/start', {});
  refresh();
});
$('threshold').addEventListener('input', () => { thresholdDirty = true; });
$('save-threshold').addEventListener('click', async () => {
  const {status, data} = await api('/api/threshold', {threshold: Number($('threshold').value)});
  if (status !== 200) alert(data.error);
  thresholdDirty = false;
  refresh();
});
$('insight-btn').addEventListener('click', async () => {
  $('insight-btn').disabled = true;
  const {status, data} = await api('/api/insight', {});
  if (status === 200) renderInsight(data.insight);
  $('insight-btn').disabled = false;
});
$('save-settings').addEventListener('click', async () => {
  const body = {chat_id: $('chat-id').value, enabled: $('tg-enabled').checked};
  if ($('bot-token').value) body.bot_token = $('bot-token').value;
  const {status} = await api('/api/settings', body);
  $('settings-msg').textContent = status === 200 ? 'Settings saved.' : 'Could not save settings.';
  loadSettings();
});
$('test-telegram').addEventListener('click', async () => {
  const {data} = await api('/api/telegram/test', {});
  $('settings-msg').textContent = data.ok ? 'Test message sent.' : 'Test message failed.';
});

refresh();
setInterval(refresh, REFRESH_MS);
</script>
{% endraw %}
</body>
</html>
"""
