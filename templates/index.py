"""
HTML Template
=============

HTML template for the web interface.
"""

HTML_TEMPLATE = """
<!doctype html>
<html lang="ar" dir="rtl">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>ماسح العملات</title>
    <style>
      * {
        box-sizing: border-box;
      }
      body {
        font-family: 'Segoe UI', Tahoma, system-ui, sans-serif;
        margin: 0;
        min-height: 100vh;
        background: #0f172a;
        color: #e2e8f0;
        display: flex;
        justify-content: center;
        align-items: center;
        padding: 1rem;
      }
      .panel {
        background: #1e293b;
        padding: 2rem;
        border-radius: 18px;
        box-shadow: 0 20px 45px rgba(15, 23, 42, 0.45);
        width: min(980px, 100%);
      }
      h1 {
        margin: 0 0 0.25rem;
        font-size: 1.8rem;
        color: #f8fafc;
      }
      .subtitle {
        color: #94a3b8;
        margin-bottom: 1.5rem;
      }
      .buttons {
        margin-bottom: 1rem;
        display: flex;
        gap: 0.75rem;
        flex-wrap: wrap;
      }
      button {
        border: none;
        padding: 0.65rem 1.3rem;
        border-radius: 999px;
        font-size: 0.95rem;
        font-weight: 600;
        cursor: pointer;
        background: #4c1d95;
        color: #f8fafc;
      }
      button.active {
        background: #ec4899;
      }
      .stream-container {
        position: relative;
        background: #020617;
        border-radius: 12px;
        overflow: hidden;
        border: 1px solid #334155;
      }
      #indicator {
        position: absolute;
        inset: 0;
        border: 6px solid #22c55e;
        border-radius: 12px;
        pointer-events: none;
        opacity: 0;
      }
      #indicator.fade {
        transition: opacity 0.5s ease;
      }
      #stream, #video {
        width: 100%;
        min-height: 360px;
        max-height: 540px;
        object-fit: contain;
        display: block;
      }
      #result {
        margin-top: 1rem;
        font-size: 1.6rem;
        font-weight: 700;
        color: #facc15;
        min-height: 2.2rem;
      }
      .status {
        color: #94a3b8;
        font-size: 0.9rem;
      }
      .status.error {
        color: #ef4444;
      }
    </style>
  </head>
  <body>
    <div class="panel">
      <h1>ماسح العملات الأردنية</h1>
      <p class="subtitle">وجّه الكاميرا نحو الورقة النقدية للتعرف عليها.</p>
      <div class="buttons">
        {% if camera_enabled %}
        <button id="server" class="active" onclick="useServerCamera()">كاميرا الخادم</button>
        {% endif %}
        <button id="device" onclick="useDeviceCamera()">كاميرا الجهاز</button>
      </div>
      <div id="container" class="stream-container">
        {% if camera_enabled %}
        <img id="stream" src="/scan_feed" alt="البث المباشر" />
        {% endif %}
        <video id="video" autoplay playsinline muted hidden></video>
        <div id="indicator"></div>
      </div>
      <div id="result"></div>
      <div id="status" class="status"></div>
    </div>
    <script>
      const session = 'web-' + Math.random().toString(36).slice(2);
      const indicator = document.getElementById('indicator');
      const stream = document.getElementById('stream');
      const video = document.getElementById('video');
      const result = document.getElementById('result');
      const status = document.getElementById('status');
      const canvas = document.createElement('canvas');
      let timer = null;

      function setActive(id) {
        document.querySelectorAll('button').forEach(b => b.classList.toggle('active', b.id === id));
      }

      function useServerCamera() {
        stopDevice();
        video.hidden = true;
        stream.hidden = false;
        stream.src = '/scan_feed?t=' + Date.now();
        setActive('server');
      }

      function stopDevice() {
        if (timer) clearInterval(timer);
        timer = null;
        if (video.srcObject) video.srcObject.getTracks().forEach(t => t.stop());
        video.srcObject = null;
      }

      function speak(text) {
        if (!window.speechSynthesis || speechSynthesis.speaking) return;
        const utterance = new SpeechSynthesisUtterance(text);
        utterance.lang = 'ar';
        speechSynthesis.speak(utterance);
      }

      // Scan indicator: full opacity, then fade out over 500 ms
      function flash() {
        indicator.classList.remove('fade');
        indicator.style.opacity = 1;
        void indicator.offsetWidth;
        indicator.classList.add('fade');
        indicator.style.opacity = 0;
      }


      function show(data) {
        if (data.skipped) return;
        if (data.error) {
          status.textContent = data.error;
          status.className = 'status error';
          return;
        }
        status.className = 'status';
        status.textContent = data.key ? data.key + ' ' + Math.round(data.confidence * 100) + '%' : '';
        if (data.message) result.textContent = data.message;
        if (data.flash) flash();
        if (data.announce) {
          speak(data.label);
          if (data.browser_vibration && navigator.vibrate) navigator.vibrate(data.browser_vibration);
        }
      }

      async function sendFrame() {
        if (!video.videoWidth) return;
        canvas.width = video.videoWidth;
        canvas.height = video.videoHeight;
        canvas.getContext('2d').drawImage(video, 0, 0);
        const image = canvas.toDataURL('image/jpeg', 0.85).split(',')[1];
        const response = await fetch('/process_frame', {
          method: 'POST',
          headers: {'Content-Type': 'application/json'},
          body: JSON.stringify({image: image, session: session, rotation: 0})
        });
        show(await response.json());
      }

      async function useDeviceCamera() {
        if (stream) { stream.src = ''; stream.hidden = true; }
        setActive('device');
        try {
          video.srcObject = await navigator.mediaDevices.getUserMedia({
            video: {facingMode: 'environment', width: 640, height: 480}
          });
          video.hidden = false;
          await fetch('/resume_scanner', {
            method: 'POST',
            headers: {'Content-Type': 'application/json'},
            body: JSON.stringify({session: session})
          });
          timer = setInterval(sendFrame, 800);
        } catch (err) {
          status.textContent = 'تم رفض إذن الكاميرا';
          status.className = 'status error';
        }
      }

      document.addEventListener('visibilitychange', () => {
        const action = document.hidden ? '/pause_scanner' : '/resume_scanner';
        fetch(action, {
          method: 'POST',
          headers: {'Content-Type': 'application/json'},
          body: JSON.stringify({session: session})
        });
      });

      if (stream) {
        stream.onerror = function() {
          status.textContent = 'تعذر تحميل البث - تحقق من الكاميرا';
          status.className = 'status error';
        };
      } else {
        useDeviceCamera();
      }
    </script>
  </body>
</html>
"""
