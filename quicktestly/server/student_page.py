"""Single-page student client served at ``/``."""

STUDENT_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>QuickTestly</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 56rem; margin-inline: auto; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      .muted { color: #94a3b8; font-size: 0.95rem; }
      input, select { width: 100%; box-sizing: border-box; padding: 0.6rem; margin: 0.25rem 0 0.75rem; border-radius: 0.5rem; border: 1px solid #334155; background: #0b1120; color: #f5f7ff; }
      .primary-button, .secondary-button { border: none; border-radius: 0.75rem; padding: 0.75rem 1.25rem; font-size: 1rem; color: #fff; cursor: pointer; transition: transform 120ms ease, background 120ms ease; }
      .primary-button { background: #1f9aa5; }
      .primary-button:hover { transform: translateY(-2px); background: #16808a; }
      .secondary-button { background: #334155; }
      .primary-button:disabled, .secondary-button:disabled { opacity: 0.6; cursor: not-allowed; }
      .quiz-list { display: grid; grid-template-columns: repeat(auto-fit, minmax(240px, 1fr)); gap: 0.75rem; }
      .quiz-tile { background: #0f1a33; border-radius: 0.75rem; padding: 1rem; }
      #question-container { min-height: 5rem; font-size: 1.1rem; line-height: 1.6; }
      .options-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 0.75rem; }
      .option-button { border: 2px solid transparent; border-radius: 0.75rem; padding: 1rem; font-size: 1rem; background: #1e293b; color: #fff; cursor: pointer; text-align: left; }
      .option-button.selected { border-color: #1f9aa5; background: #134e57; }
      .option-button.correct { border-color: #4ade80; }
      .option-button.wrong { border-color: #f87171; }
      .nav-grid { display: flex; flex-wrap: wrap; gap: 0.4rem; margin: 1rem 0; }
      .nav-cell { width: 2.25rem; height: 2.25rem; border-radius: 0.5rem; border: none; background: #334155; color: #fff; cursor: pointer; }
      .nav-cell.answered { background: #1f9aa5; }
      .nav-cell.current { outline: 2px solid #facc15; }
      .actions { display: flex; gap: 0.75rem; justify-content: space-between; flex-wrap: wrap; }
      #timer-label { font-size: 1.25rem; font-variant-numeric: tabular-nums; }
      #timer-label.low { color: #f87171; }
      #low-time-banner { background: #7f1d1d; border-radius: 0.5rem; padding: 0.5rem 1rem; }
      #status { min-height: 1.25rem; }
      table { width: 100%; border-collapse: collapse; }
      th, td { text-align: left; padding: 0.4rem; border-bottom: 1px solid #1e293b; }
      .grade { font-size: 3rem; font-weight: 700; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, svg: { fontCache: 'global' } };
    </script>
    <script defer src=\"https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js\"></script>
  </head>
  <body>
    <section class=\"card\" id=\"identity-card\">
      <h1>QuickTestly</h1>
      <p class=\"muted\">Sign in with your name and email to take quizzes.</p>
      <label>Name<input id=\"identity-name\" autocomplete=\"name\" /></label>
      <label>Email<input id=\"identity-email\" type=\"email\" autocomplete=\"email\" /></label>
      <button id=\"identity-button\" class=\"primary-button\">Continue</button>
      <p id=\"identity-status\" class=\"muted\"></p>
    </section>

    <section class=\"card hidden\" id=\"quizzes-card\">
      <h2>Available quizzes</h2>
      <p id=\"who-am-i\" class=\"muted\"></p>
      <div id=\"quiz-list\" class=\"quiz-list\"></div>
      <h3>My results</h3>
      <table><thead><tr><th>Quiz</th><th>Score</th><th>Grade</th><th>Time</th><th>Date</th></tr></thead>
        <tbody id=\"my-results\"></tbody></table>
    </section>

    <section class=\"card hidden\" id=\"rules-card\">
      <h2 id=\"rules-title\"></h2>
      <p id=\"rules-description\"></p>
      <ul>
        <li id=\"rules-questions\"></li>
        <li id=\"rules-time\"></li>
        <li>Questions and answer options appear in random order.</li>
        <li>You can move between questions and change answers until you submit.</li>
        <li>The quiz is submitted automatically when the time runs out.</li>
      </ul>
      <div class=\"actions\">
        <button id=\"rules-back\" class=\"secondary-button\">Back</button>
        <button id=\"rules-start\" class=\"primary-button\">Start quiz</button>
      </div>
      <p id=\"rules-status\" class=\"muted\"></p>
    </section>

    <section class=\"card hidden\" id=\"attempt-card\">
      <div class=\"actions\">
        <span id=\"progress-label\" class=\"muted\"></span>
        <span id=\"timer-label\"></span>
      </div>
      <p id=\"low-time-banner\" class=\"hidden\">Less than a minute left!</p>
      <div id=\"question-container\"></div>
      <div id=\"options-container\" class=\"options-grid\"></div>
      <div id=\"nav-grid\" class=\"nav-grid\"></div>
      <div class=\"actions\">
        <button id=\"prev-button\" class=\"secondary-button\">Previous</button>
        <button id=\"submit-button\" class=\"primary-button\">Submit quiz</button>
        <button id=\"next-button\" class=\"secondary-button\">Next</button>
      </div>
      <p id=\"status\"></p>
    </section>

    <section class=\"card hidden\" id=\"result-card\">
      <h2 id=\"result-title\"></h2>
      <div class=\"grade\" id=\"result-grade\"></div>
      <p id=\"result-summary\"></p>
      <p id=\"result-rank\" class=\"muted\"></p>
      <button id=\"retry-button\" class=\"primary-button hidden\">Retry saving</button>
      <h3>Leaderboard</h3>
      <table><thead><tr><th>#</th><th>Name</th><th>Score</th><th>Time</th></tr></thead>
        <tbody id=\"leaderboard-body\"></tbody></table>
      <h3>Review</h3>
      <div id=\"review-container\"></div>
      <button id=\"result-back\" class=\"secondary-button\">Back to quizzes</button>
    </section>

    <script>
      const cards = ['identity-card', 'quizzes-card', 'rules-card', 'attempt-card', 'result-card']
        .map(id => document.getElementById(id));
      const $ = id => document.getElementById(id);

      let selectedQuiz = null;
      let attempt = null;
      let localRemaining = 0;
      let countdownHandle = null;
      let pollHandle = null;
      let audioContext = null;

      function showCard(id) {
        cards.forEach(card => card.classList.toggle('hidden', card.id !== id));
      }

      function formatSeconds(total) {
        const minutes = Math.floor(total / 60);
        const seconds = total % 60;
        return `${minutes}:${String(seconds).padStart(2, '0')}`;
      }

      function beep(frequency, durationMs) {
        try {
          audioContext = audioContext || new (window.AudioContext || window.webkitAudioContext)();
          const oscillator = audioContext.createOscillator();
          const gain = audioContext.createGain();
          oscillator.frequency.value = frequency;
          gain.gain.value = 0.05;
          oscillator.connect(gain);
          gain.connect(audioContext.destination);
          oscillator.start();
          oscillator.stop(audioContext.currentTime + durationMs / 1000);
        } catch (error) {
          console.warn('Audio unavailable:', error);
        }
      }

      async function typesetMath(targets) {
        for (let i = 0; i < 15; i++) {
          if (window.MathJax && window.MathJax.typesetPromise) {
            try {
              await window.MathJax.typesetPromise(targets);
              return;
            } catch (err) {
              console.warn('MathJax typeset error:', err);
            }
          }
          await new Promise(resolve => setTimeout(resolve, 150));
        }
      }

      async function api(path, options = {}) {
        const response = await fetch(path, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        const body = response.status === 204 ? {} : await response.json().catch(() => ({}));
        return { ok: response.ok, status: response.status, body };
      }

      function detailMessage(body, fallback) {
        if (!body || !body.detail) return fallback;
        if (typeof body.detail === 'string') return body.detail;
        return body.detail.message || fallback;
      }

      // --- Identity ---

      async function loadIdentity() {
        const { body } = await api('/identity');
        if (body.identity) {
          $('who-am-i').textContent = `Signed in as ${body.identity.name} (${body.identity.email})`;
          await showQuizzes();
        } else {
          showCard('identity-card');
        }
      }

      $('identity-button').addEventListener('click', async () => {
        const name = $('identity-name').value.trim();
        const email = $('identity-email').value.trim();
        const { ok, body } = await api('/identity', {
          method: 'POST',
          body: JSON.stringify({ name, email }),
        });
        if (!ok) {
          $('identity-status').textContent = 'Please enter your name and a valid email.';
          return;
        }
        $('who-am-i').textContent = `Signed in as ${body.identity.name} (${body.identity.email})`;
        await showQuizzes();
      });

      // --- Quiz list ---

      async function showQuizzes() {
        showCard('quizzes-card');
        const list = $('quiz-list');
        list.innerHTML = '';
        const { ok, body } = await api('/quizzes');
        if (!ok) {
          list.textContent = detailMessage(body, 'Unable to load quizzes.');
          return;
        }
        if (!body.quizzes.length) {
          list.textContent = 'No quizzes are available yet.';
        }
        body.quizzes.forEach(quiz => {
          const tile = document.createElement('div');
          tile.className = 'quiz-tile';
          const title = document.createElement('h3');
          title.textContent = quiz.name;
          const meta = document.createElement('p');
          meta.className = 'muted';
          meta.textContent = `${quiz.question_count} questions · ${quiz.time_limit_minutes} min · by ${quiz.created_by_teacher_name || 'unknown'}`;
          const button = document.createElement('button');
          button.className = 'primary-button';
          button.textContent = 'Take quiz';
          button.addEventListener('click', () => showRules(quiz));
          tile.append(title, meta, button);
          list.appendChild(tile);
        });
        await loadMyResults();
      }

      async function loadMyResults() {
        const tbody = $('my-results');
        tbody.innerHTML = '';
        const { ok, body } = await api('/me/results');
        if (!ok) return;
        body.results.forEach(result => {
          const row = document.createElement('tr');
          [result.quiz_name, `${result.score}%`, result.grade, formatSeconds(result.time_spent_seconds),
            new Date(result.completed_at).toLocaleString()].forEach(value => {
            const cell = document.createElement('td');
            cell.textContent = value;
            row.appendChild(cell);
          });
          tbody.appendChild(row);
        });
      }

      function showRules(quiz) {
        selectedQuiz = quiz;
        $('rules-title').textContent = quiz.name;
        $('rules-description').textContent = quiz.description;
        $('rules-questions').textContent = `${quiz.question_count} questions`;
        $('rules-time').textContent = `${quiz.time_limit_minutes} minutes time limit`;
        $('rules-status').textContent = '';
        showCard('rules-card');
      }

      $('rules-back').addEventListener('click', showQuizzes);

      $('rules-start').addEventListener('click', async () => {
        $('rules-start').disabled = true;
        const { ok, body } = await api('/attempts', {
          method: 'POST',
          body: JSON.stringify({ quiz_id: selectedQuiz.id }),
        });
        $('rules-start').disabled = false;
        if (!ok) {
          $('rules-status').textContent = detailMessage(body, 'Unable to start the quiz.');
          return;
        }
        beginAttempt(body);
      });

      // --- Attempt ---

      function beginAttempt(state) {
        attempt = state;
        localRemaining = state.remaining_seconds;
        $('low-time-banner').classList.add('hidden');
        $('timer-label').classList.remove('low');
        showCard('attempt-card');
        renderAttempt();
        clearInterval(countdownHandle);
        clearInterval(pollHandle);
        countdownHandle = setInterval(countdown, 1000);
        pollHandle = setInterval(refreshAttempt, 5000);
      }

      function stopClocks() {
        clearInterval(countdownHandle);
        clearInterval(pollHandle);
        countdownHandle = null;
        pollHandle = null;
      }

      function countdown() {
        const previous = localRemaining;
        localRemaining = Math.max(0, localRemaining - 1);
        if (previous === 60) {
          $('low-time-banner').classList.remove('hidden');
          $('timer-label').classList.add('low');
          beep(440, 400);
        } else if (localRemaining >= 1 && localRemaining <= 10) {
          beep(880, 80);
        }
        $('timer-label').textContent = formatSeconds(localRemaining);
        if (localRemaining === 0) {
          refreshAttempt();
        }
      }

      async function refreshAttempt() {
        if (!attempt) return;
        const { ok, body } = await api(`/attempts/${attempt.attempt_id}`);
        if (!ok) return;
        attempt = body;
        localRemaining = Math.min(localRemaining, body.remaining_seconds);
        if (body.low_time_warning) {
          $('low-time-banner').classList.remove('hidden');
          $('timer-label').classList.add('low');
        }
        if (body.status !== 'in_progress') {
          showResult(body);
        }
      }

      function renderAttempt() {
        const question = attempt.questions[attempt.current_index];
        $('progress-label').textContent =
          `Question ${attempt.current_index + 1} of ${attempt.question_count} · ${attempt.answered_count} answered`;
        $('timer-label').textContent = formatSeconds(localRemaining);
        $('question-container').innerHTML = question.question_html;
        const options = $('options-container');
        options.innerHTML = '';
        question.options.forEach((option, index) => {
          const button = document.createElement('button');
          button.className = 'option-button';
          if (question.selected === option.value) button.classList.add('selected');
          button.innerHTML = `<strong>${String.fromCharCode(65 + index)}.</strong> ${option.html}`;
          button.addEventListener('click', () => selectAnswer(question, option.value));
          options.appendChild(button);
        });
        const grid = $('nav-grid');
        grid.innerHTML = '';
        attempt.questions.forEach((item, index) => {
          const cell = document.createElement('button');
          cell.className = 'nav-cell';
          if (item.selected !== null) cell.classList.add('answered');
          if (index === attempt.current_index) cell.classList.add('current');
          cell.textContent = String(index + 1);
          cell.addEventListener('click', () => navigate({ index }));
          grid.appendChild(cell);
        });
        $('prev-button').disabled = attempt.current_index === 0;
        $('next-button').disabled = attempt.current_index === attempt.question_count - 1;
        typesetMath([$('question-container'), options]);
      }

      async function selectAnswer(question, value) {
        const { ok, body } = await api(`/attempts/${attempt.attempt_id}/answer`, {
          method: 'POST',
          body: JSON.stringify({ question_id: question.id, option: value }),
        });
        if (!ok) {
          $('status').textContent = detailMessage(body, 'Unable to save the answer.');
          await refreshAttempt();
          return;
        }
        question.selected = value;
        attempt.answered_count = body.answered_count;
        $('status').textContent = '';
        renderAttempt();
      }

      async function navigate(payload) {
        const { ok, body } = await api(`/attempts/${attempt.attempt_id}/navigate`, {
          method: 'POST',
          body: JSON.stringify(payload),
        });
        if (ok) {
          attempt.current_index = body.current_index;
          renderAttempt();
        }
      }

      $('prev-button').addEventListener('click', () => navigate({ direction: 'previous' }));
      $('next-button').addEventListener('click', () => navigate({ direction: 'next' }));

      async function submitAttempt(confirmed) {
        $('submit-button').disabled = true;
        const { ok, status, body } = await api(`/attempts/${attempt.attempt_id}/submit`, {
          method: 'POST',
          body: JSON.stringify({ confirmed }),
        });
        $('submit-button').disabled = false;
        if (ok) {
          showResult(body);
        } else if (status === 409 && body.detail && body.detail.unanswered) {
          const proceed = window.confirm(
            `You have ${body.detail.unanswered} unanswered question(s). Submit anyway?`);
          if (proceed) await submitAttempt(true);
        } else if (status === 502) {
          await refreshAttempt();
        } else {
          $('status').textContent = detailMessage(body, 'Unable to submit the quiz.');
        }
      }

      $('submit-button').addEventListener('click', () => submitAttempt(false));

      // --- Result ---

      async function showResult(state) {
        stopClocks();
        attempt = state;
        showCard('result-card');
        const result = state.result;
        $('result-title').textContent = state.forced ? "Time's up!" : 'Quiz submitted';
        if (result) {
          $('result-grade').textContent = result.grade;
          $('result-summary').textContent =
            `${result.score}% · ${result.correct_answers} of ${result.total_questions} correct · ${formatSeconds(result.time_spent_seconds)}`;
        }
        const failed = state.status === 'persist_failed';
        $('retry-button').classList.toggle('hidden', !failed);
        $('result-rank').textContent = failed ? (state.error || 'Your result could not be saved.') : '';
        renderReview(state);
        if (!failed) await loadLeaderboard(state.quiz.id);
      }

      function renderReview(state) {
        const container = $('review-container');
        container.innerHTML = '';
        state.questions.forEach((question, index) => {
          const block = document.createElement('div');
          block.innerHTML = `<p><strong>${index + 1}.</strong></p>${question.question_html}`;
          question.options.forEach(option => {
            const line = document.createElement('div');
            line.className = 'option-button';
            if (option.value === question.correct_option) line.classList.add('correct');
            else if (option.value === question.selected) line.classList.add('wrong');
            line.innerHTML = option.html;
            block.appendChild(line);
          });
          container.appendChild(block);
        });
        typesetMath([container]);
      }

      async function loadLeaderboard(quizId) {
        const tbody = $('leaderboard-body');
        tbody.innerHTML = '';
        const { ok, body } = await api(`/quizzes/${quizId}/leaderboard`);
        if (!ok) return;
        if (body.your_rank) {
          $('result-rank').textContent = `You are ranked #${body.your_rank} on this quiz.`;
        }
        body.leaderboard.forEach((result, index) => {
          const row = document.createElement('tr');
          [String(index + 1), result.user_name, `${result.score}%`, formatSeconds(result.time_spent_seconds)]
            .forEach(value => {
              const cell = document.createElement('td');
              cell.textContent = value;
              row.appendChild(cell);
            });
          tbody.appendChild(row);
        });
      }

      $('retry-button').addEventListener('click', async () => {
        const { ok, body } = await api(`/attempts/${attempt.attempt_id}/retry`, { method: 'POST' });
        if (ok) {
          showResult(body);
        } else {
          $('result-rank').textContent = detailMessage(body, 'Still unable to save. Try again shortly.');
        }
      });

      $('result-back').addEventListener('click', () => {
        attempt = null;
        showQuizzes();
      });

      loadIdentity();
    </script>
  </body>
</html>
"""
