"""Browser canvas view for squat sessions.

The page owns only a pause-aware clock (the same bookkeeping as
``core.Clock``) and posts each sample to ``/session/tick``; phases,
progress and events all come back from the server-side core.
"""
import json
from dataclasses import asdict, dataclass

from squat_trainer import __version__
from squat_trainer.core import SessionConfig


@dataclass(frozen=True)
class WebViewOptions:
    """Presentation options for one page, passed explicitly per request."""
    swing_start: float = 0.4
    swing_stop: float = 3.4
    freq: float = 10.0
    countdown_seconds: int = 5
    rest_countdown_seconds: int = 3
    voice: bool = True

    def validate(self) -> None:
        if self.swing_start < 0 or self.swing_stop < 0 or self.freq < 0:
            raise ValueError("swing-start, swing-stop, and freq must be >= 0")
        if self.countdown_seconds < 0 or self.rest_countdown_seconds < 0:
            raise ValueError("countdown values must be >= 0")


def render_page(config: SessionConfig, options: WebViewOptions) -> str:
    """Fill the page template with the session parameters."""
    boot = {
        "config": {
            "set_active_seconds": config.set_active_seconds,
            "reps_per_set": config.reps_per_set,
            "hold_seconds": config.hold_seconds,
            "sets": config.sets,
            "rest_seconds": config.rest_seconds,
        },
        "tempo": {
            "down": config.down_duration,
            "hold": config.hold_seconds,
            "up": config.up_duration,
            "total": config.total_duration,
        },
        "options": asdict(options),
    }
    # "</" must not appear inside the inline script
    payload = json.dumps(boot).replace("</", "<\\/")
    return HTML_SQUAT.replace("__BOOT__", payload).replace("__VERSION__", __version__)


HTML_SQUAT = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Slow Squat</title>
  <style>
    :root {
      --bg: #f5f0e6;
      --ink: #1d1c1a;
      --accent: #c24a3a;
      --accent-2: #2f6f6d;
      --grid: #e1d6c4;
      --paper: rgba(255, 255, 255, 0.78);
      --shadow: 0 18px 50px rgba(36, 32, 27, 0.18);
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      min-height: 100vh;
      font-family: "Avenir Next", "Helvetica Neue", sans-serif;
      background: var(--bg);
      color: var(--ink);
    }
    #version { position: fixed; top: 10px; right: 12px; font-size: 12px; opacity: 0.6; }
    #app { min-height: 100vh; display: flex; flex-direction: column; gap: 16px; padding: 20px; }
    #info {
      padding: 18px 22px 14px;
      line-height: 1.6;
      background: var(--paper);
      border: 1px solid var(--grid);
      border-radius: 18px;
      box-shadow: var(--shadow);
    }
    #line1 { font-size: 20px; font-weight: 700; letter-spacing: 0.06em; text-transform: uppercase; }
    #line2 { font-size: 15px; opacity: 0.85; }
    #line5 { font-size: 13px; opacity: 0.7; }
    #canvas-wrap {
      flex: 1;
      min-height: 280px;
      position: relative;
      background: var(--paper);
      border: 1px solid var(--grid);
      border-radius: 22px;
      box-shadow: var(--shadow);
      overflow: hidden;
    }
    canvas { position: absolute; inset: 0; width: 100%; height: 100%; display: block; }
  </style>
</head>
<body>
  <div id="version">v__VERSION__</div>
  <div id="app">
    <div id="info">
      <div id="line1">Slow Squat</div>
      <div id="line2">Phase: DOWN</div>
      <div id="line3">Time left: 00:00.000</div>
      <div id="line4">Status: WAITING</div>
      <div id="line5">Controls: ENTER=Start/Skip  SPACE=Pause/Resume  ESC=Quit</div>
      <label><input id="voice-toggle" type="checkbox" /> Voice</label>
    </div>
    <div id="canvas-wrap"><canvas id="squat"></canvas></div>
  </div>
  <script>
    (() => {
      const boot = __BOOT__;
      const opts = boot.options;
      const tempo = boot.tempo;
      const cfg = boot.config;
      const palette = { ink: "#1d1c1a", accent: "#c24a3a", accent2: "#2f6f6d", paper: "rgba(255,255,255,0.9)" };

      const line1 = document.getElementById("line1");
      const line2 = document.getElementById("line2");
      const line3 = document.getElementById("line3");
      const line4 = document.getElementById("line4");
      const voiceToggle = document.getElementById("voice-toggle");
      const canvas = document.getElementById("squat");
      const ctx = canvas.getContext("2d");
      let viewWidth = 0;
      let viewHeight = 0;

      // waiting -> countdown -> running -> finished | stopped
      let mode = "waiting";
      let countdownStart = 0;
      let startedAt = 0;
      let pausedSince = null;
      let pausedTotal = 0;
      let inFlight = false;
      let tstate = {};
      let snapshot = null;
      let countdownShown = opts.countdown_seconds;
      let callout = "";
      let calloutUntil = 0;
      let voiceEnabled = opts.voice;
      let speechReady = false;
      voiceToggle.checked = voiceEnabled;
      voiceToggle.addEventListener("change", () => { voiceEnabled = voiceToggle.checked; });

      function pad(value, width) { return String(value).padStart(width, "0"); }

      function formatTimeLeft(seconds) {
        const ms = Math.max(0, Math.floor(seconds * 1000));
        const totalSec = Math.floor(ms / 1000);
        return `${pad(Math.floor(totalSec / 60), 2)}:${pad(totalSec % 60, 2)}.${pad(ms % 1000, 3)}`;
      }

      function activeElapsed(now) {
        const effectiveNow = pausedSince !== null ? pausedSince : now;
        return Math.max(0, (effectiveNow - startedAt - pausedTotal) / 1000);
      }

      function speak(text) {
        if (!voiceEnabled || !text || !("speechSynthesis" in window)) { return; }
        try {
          window.speechSynthesis.cancel();
          const utter = new SpeechSynthesisUtterance(text.replace("!", ""));
          utter.volume = 0.9;
          window.speechSynthesis.speak(utter);
        } catch (err) {
          console.warn("speech failed", err);
        }
      }

      // Mobile Safari only speaks after an utterance queued from a user gesture.
      function unlockSpeech() {
        if (!voiceEnabled || speechReady || !("speechSynthesis" in window)) { return; }
        speechReady = true;
        try {
          const utter = new SpeechSynthesisUtterance(" ");
          utter.volume = 0;
          window.speechSynthesis.speak(utter);
        } catch (err) {
          console.warn("speech unlock failed", err);
        }
      }

      function handleEvents(events, now) {
        for (const event of events) {
          if (!event.callout) { continue; }
          callout = event.callout;
          calloutUntil = now + 700;
          speak(event.callout);
        }
      }

      function startRunning() {
        mode = "running";
        startedAt = performance.now();
        pausedSince = null;
        pausedTotal = 0;
      }

      function sendTick(now) {
        if (inFlight || (mode !== "countdown" && mode !== "running")) { return; }
        const body = {
          config: cfg,
          countdown_seconds: opts.countdown_seconds,
          rest_countdown_seconds: opts.rest_countdown_seconds,
          state: tstate,
        };
        if (mode === "countdown") {
          body.countdown_elapsed_seconds = (now - countdownStart) / 1000;
        } else {
          body.active_elapsed_seconds = activeElapsed(now);
        }
        inFlight = true;
        fetch("/session/tick", {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(body),
        })
          .then((res) => res.json())
          .then((data) => {
            if (mode === "stopped") { return; }
            tstate = data.state;
            handleEvents(data.events, performance.now());
            if (mode === "countdown") {
              countdownShown = data.countdown;
              if (data.countdown_finished) { startRunning(); }
            } else if (data.snapshot) {
              snapshot = data.snapshot;
              if (snapshot.done) { mode = "finished"; }
            }
          })
          .catch((err) => console.error("tick failed", err))
          .finally(() => { inFlight = false; });
      }

      function resize() {
        const rect = canvas.getBoundingClientRect();
        viewWidth = rect.width;
        viewHeight = rect.height;
        const dpr = window.devicePixelRatio || 1;
        canvas.width = rect.width * dpr;
        canvas.height = rect.height * dpr;
        ctx.setTransform(dpr, 0, 0, dpr, 0, 0);
      }

      function lerp(a, b, t) { return a + (b - a) * t; }

      function line(ax, ay, bx, by) {
        ctx.beginPath();
        ctx.moveTo(ax, ay);
        ctx.lineTo(bx, by);
        ctx.stroke();
      }

      function bar(x, y, w, h, percent, color, vertical) {
        const clamped = Math.max(0, Math.min(100, percent));
        ctx.fillStyle = palette.paper;
        ctx.fillRect(x, y, w, h);
        ctx.fillStyle = color;
        if (vertical) {
          const fill = (h * clamped) / 100;
          ctx.fillRect(x, y + h - fill, w, fill);
        } else {
          ctx.fillRect(x, y, (w * clamped) / 100, h);
        }
        ctx.strokeStyle = "rgba(29, 28, 26, 0.2)";
        ctx.strokeRect(x, y, w, h);
      }

      function kneeFromHip(hipX, hipY, ankleX, ankleY, thigh, shin, left) {
        const dx = ankleX - hipX;
        const dy = ankleY - hipY;
        const dist = Math.max(0.001, Math.hypot(dx, dy));
        const d = Math.max(Math.abs(thigh - shin) + 0.001, Math.min(thigh + shin - 0.001, dist));
        const a = (thigh * thigh - shin * shin + d * d) / (2 * d);
        const h = Math.sqrt(Math.max(thigh * thigh - a * a, 0));
        const px = hipX + (a * dx) / d;
        const py = hipY + (a * dy) / d;
        const k1 = { x: px - (h * dy) / d, y: py + (h * dx) / d };
        const k2 = { x: px + (h * dy) / d, y: py - (h * dx) / d };
        return left === (k1.x < k2.x) ? k1 : k2;
      }

      function drawFigure(now) {
        const w = viewWidth;
        const h = viewHeight;
        const depth = snapshot ? snapshot.depth : 0;
        const fatigue = snapshot ? snapshot.overall_progress_pct / 100 : 0;
        const resting = snapshot && snapshot.phase === "rest";
        const still = resting || mode !== "running" || pausedSince !== null;
        const swing = opts.swing_start + (opts.swing_stop - opts.swing_start) * fatigue * fatigue;
        const scale = Math.min(w, h) / 340;
        const base = (Math.PI * 2 * opts.freq * now) / 1000;
        const tremor = still ? 0 : (Math.sin(base) + Math.sin(base * 2.4) * 0.4) * swing * scale;

        const ground = h * 0.86;
        const thigh = 80 * scale;
        const shin = 80 * scale;
        const torso = 78 * scale;
        const hipY = lerp(ground - (thigh + shin), ground - shin + 6 * scale, depth);
        const hipX = w * 0.5 + tremor;
        const shoulderX = hipX - depth * 26 * scale + tremor * 0.3;
        const shoulderY = hipY - torso + depth * 12 * scale;
        const spread = 36 * scale;

        ctx.strokeStyle = palette.ink;
        ctx.lineWidth = 8 * scale;
        ctx.lineCap = "round";
        for (const side of [-1, 1]) {
          const ankleX = w * 0.5 + side * spread;
          const hipSideX = hipX + side * 12 * scale;
          const knee = kneeFromHip(hipSideX, hipY, ankleX, ground, thigh, shin, side < 0);
          line(hipSideX, hipY, knee.x, knee.y);
          line(knee.x, knee.y, ankleX, ground);
          line(ankleX, ground, ankleX + side * 14 * scale, ground);
          line(shoulderX, shoulderY + 8 * scale, shoulderX + side * 30 * scale, shoulderY + (26 + depth * 10) * scale);
        }
        line(hipX, hipY, shoulderX, shoulderY);
        ctx.beginPath();
        ctx.arc(shoulderX, shoulderY - 20 * scale, 12 * scale, 0, Math.PI * 2);
        ctx.fillStyle = palette.ink;
        ctx.fill();
        line(0, ground, w, ground);
      }

      function drawText(text, x, y, size, align) {
        ctx.font = `700 ${size}px "Avenir Next", sans-serif`;
        ctx.fillStyle = palette.ink;
        ctx.textAlign = align || "center";
        ctx.textBaseline = "middle";
        ctx.fillText(text, x, y);
      }

      function draw(now) {
        const w = viewWidth;
        const h = viewHeight;
        if (!w || !h) { return; }
        ctx.clearRect(0, 0, w, h);
        if (mode === "waiting") {
          drawText("PRESS ENTER TO SQUAT", w / 2, h / 2, Math.max(22, h * 0.08));
          return;
        }
        if (mode === "countdown") {
          drawText(String(countdownShown), w / 2, h / 2, Math.max(48, h * 0.5));
          return;
        }
        drawFigure(now);
        if (!snapshot) { return; }
        const barH = Math.max(160, h * 0.6);
        const barY = (h - barH) / 2;
        bar(w * 0.04, barY, 20, barH, snapshot.move_progress_pct, palette.accent, true);
        bar(w * 0.04 + 50, barY, 20, barH, snapshot.hold_progress_pct, palette.accent2, true);
        const wide = Math.max(220, w * 0.55);
        bar((w - wide) / 2, h * 0.9 - 34, wide, 14, snapshot.set_progress_pct, palette.accent, false);
        bar((w - wide) / 2, h * 0.9, wide, 14, snapshot.overall_progress_pct, palette.accent2, false);
        if (snapshot.phase === "rest") {
          bar(w * 0.62, h * 0.5, Math.max(140, w * 0.28), 12, snapshot.rest_progress_pct, palette.accent2, false);
          drawText(`REST ${snapshot.rest_progress_pct.toFixed(0)}%`, w * 0.62, h * 0.5 - 14, 14, "left");
        }
        drawText(formatTimeLeft(snapshot.remaining_seconds), w - 120, 30, Math.max(20, h * 0.05));
        if (callout && now < calloutUntil) {
          drawText(callout, w / 2, h * 0.46, Math.max(26, h * 0.12));
        }
      }

      function updateInfo() {
        const s = snapshot;
        line2.textContent = `Phase: ${s ? s.phase.toUpperCase() : "DOWN"}  Tempo: down ${tempo.down.toFixed(1)}s / hold ${tempo.hold.toFixed(1)}s / up ${tempo.up.toFixed(1)}s`;
        if (!s) {
          line1.textContent = `Slow Squat  Set: 1/${cfg.sets}  Rep: 1/${cfg.reps_per_set}`;
          line3.textContent = `Time left: ${formatTimeLeft(tempo.total)}`;
        } else {
          line1.textContent = `Slow Squat  Set: ${s.set_index}/${s.sets}  Rep: ${s.rep_index}/${s.reps_per_set}`;
          line3.textContent = `Time left: ${formatTimeLeft(s.remaining_seconds)}`;
        }
        if (mode === "waiting") {
          line4.textContent = "Status: WAITING (ENTER)";
        } else if (mode === "countdown") {
          line4.textContent = `Status: COUNTDOWN ${countdownShown}`;
        } else if (mode === "stopped") {
          line4.textContent = "Status: STOPPED";
        } else if (pausedSince !== null) {
          line4.textContent = "Status: PAUSED";
        } else if (s && s.done) {
          line4.textContent = "Status: COMPLETE";
        } else if (s && s.phase === "rest") {
          line4.textContent = `Status: REST ${formatTimeLeft(s.rest_remaining_seconds)}`;
        } else {
          line4.textContent = "Status: RUNNING";
        }
      }

      function frame() {
        const now = performance.now();
        sendTick(now);
        draw(now);
        updateInfo();
        if (mode !== "finished" && mode !== "stopped") {
          requestAnimationFrame(frame);
        }
      }

      function startOrSkip() {
        unlockSpeech();
        if (mode === "waiting") {
          if (opts.countdown_seconds > 0) {
            mode = "countdown";
            countdownStart = performance.now();
          } else {
            startRunning();
          }
        } else if (mode === "countdown") {
          startRunning();
        }
      }

      function togglePause() {
        if (mode !== "running") { return; }
        if (pausedSince !== null) {
          pausedTotal += performance.now() - pausedSince;
          pausedSince = null;
        } else {
          pausedSince = performance.now();
        }
      }

      function stop() {
        if (mode === "finished" || mode === "stopped") { return; }
        mode = "stopped";
        updateInfo();
      }

      window.addEventListener("keydown", (event) => {
        if (event.code === "Enter") {
          startOrSkip();
        } else if (event.code === "Space") {
          event.preventDefault();
          togglePause();
        } else if (event.code === "Escape") {
          stop();
        } else if ((event.ctrlKey || event.metaKey) && (event.key === "c" || event.key === "C")) {
          stop();
        }
      });
      canvas.addEventListener("pointerdown", (event) => {
        event.preventDefault();
        if (mode === "running") {
          togglePause();
        } else {
          startOrSkip();
        }
      });
      window.addEventListener("resize", resize);

      resize();
      requestAnimationFrame(frame);
    })();
  </script>
</body>
</html>
"""
