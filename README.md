# pumpsim

`pumpsim` simulates an insulin pump connected to a continuous glucose
monitor (CGM), with a text command interface. It is a teaching and
demonstration tool. It is **not** medical software, and nothing it
computes should guide real treatment.

## What it simulates

- **CGM readings.** Each tick moves simulated time forward by five
  minutes. The blood glucose (BG) value, which starts at 7.0 mmol/L,
  takes a small random step and is clamped to 2.5–18.0 mmol/L. The
  simulator keeps the last six readings (thirty simulated minutes).
- **Manual boluses.** The suggested bolus is carbs ÷ carb ratio, plus
  (BG − target) ÷ correction factor when BG is above target, minus
  insulin on board, and never below zero. A bolus can be split so that
  a percentage of it is recorded as an extended portion over a number
  of hours; both portions are recorded at once.
- **Safety limits.** A bolus must be more than 0 U and at most 10 U,
  the running total of delivered boluses may not pass 30 U, and a new
  bolus must wait 10 minutes (real, monotonic clock time) after the
  last one. A refused bolus raises `BolusSafetyError` with a message
  such as `Exceeds max single bolus of 10U.`
- **Control-IQ style adjustments.** With six readings available, each
  new reading is used to predict BG thirty minutes ahead
  (current + (current − oldest)):
  - below 3.9 mmol/L: a "Basal suspended" entry is logged;
  - 14.0 mmol/L or more: a 1 U automatic correction is delivered,
    subject to the safety limits (a blocked one is logged as a warning);
  - 10.0 mmol/L or more: a "Basal increased" entry is logged.
- **Warnings.** Each check drains the battery by 1 %, warns when the
  battery is exactly 20 % or 5 %, when the reservoir holds 20 U or
  less (or 5 U or less), and when BG is below 3.9 or above 13.9 mmol/L.
- **History.** Every reading, bolus, adjustment and warning is logged
  with its simulated time stamp (`HH:MM`).

## Running the simulator

```
pumpsim [--seed N] [--interval SECONDS]
```

- `--seed` seeds the CGM random walk so runs can be repeated.
- `--interval` is the number of seconds between automatic simulation
  steps (default 1.0); `0` disables automatic ticking, so the
  simulation only moves with the `tick` command.

Warnings are checked once every 30 steps. The console simulator starts
with the battery at 8 % and the reservoir at 4 U, so warnings appear
early. Warnings are printed as `Pump Warning: <message>`.

Commands at the `>` prompt:

```
status                    show time, battery, insulin and BG
tick [N]                  advance the simulation N steps (default 1)
bg manual|cgm             choose where the bolus BG comes from
calc CARBS IOB [BG]       calculate the suggested bolus
deliver [PERCENT [HOURS]] deliver the suggested bolus, optionally extended
profiles                  list profiles
profile add               add a profile
profile edit N            edit profile N
profile delete N          delete profile N
profile use N             activate profile N
history                   show the history log
alerts                    show pump warnings
graph                     show the visible CGM points
help                      show this text
quit                      leave
```

Notes:

- In `cgm` mode the BG comes from the sensor and a BG given to `calc`
  is ignored.
- `deliver` needs a suggestion from `calc`. Giving a percentage (0–100)
  makes the bolus extended; the hours (1–24, default 3) are kept from
  the last time they were set.
- `profiles` marks the active profile with `*`. `profile add` and
  `profile edit` ask for each field on the terminal; an empty answer
  keeps the value shown, an out-of-range or non-numeric value is asked
  again, numbers are rounded to one decimal, and end of input cancels.
- `graph` lists the points inside the visible window, which starts at
  0–60 s and scrolls as readings arrive.
- `exit` or end of input also leaves.

## Using it as a library

```python
from pumpsim.safety import BolusSafetyManager, BolusSafetyError

safety = BolusSafetyManager()
safety.can_deliver(12.0)      # False: above the 10 U single-bolus limit

try:
    safety.check(12.0)
except BolusSafetyError as error:
    print(error)              # Exceeds max single bolus of 10U.
```

Modules:

- `pumpsim.records`: `RecordType`, `HistoryRecord`, `HistoryManager`
  (with `records` and `warnings`), `BolusRecord`, `BolusHistoryManager`.
- `pumpsim.profiles`: `UserProfile` and `UserProfileManager`. The
  manager starts with a "Default" profile: basal 1.0 U/h, carb ratio
  10 g/U, correction factor 2.0 mmol/L per U, target 6.0 mmol/L.
  Out-of-range indices to `update_profile` and `delete_profile` are
  ignored (they return `False`).
- `pumpsim.safety`: `BolusSafetyManager` (`check`, `can_deliver`,
  `record_bolus`, `total_daily_bolus`) and `BolusSafetyError`. Limits
  and the clock can be passed to the constructor.
- `pumpsim.cgm`: `CgmSimulator`. Call `tick()` to advance it and
  `subscribe(callback)` to receive each new BG value.
- `pumpsim.pump`: `PumpController`, with `request_bolus(...)` (raises
  `BolusSafetyError` when refused) and `on_cgm_updated(...)`, which it
  subscribes to the CGM itself.
- `pumpsim.alerts`: `WarningChecker`, with `check()` and
  `start_monitoring(interval)` / `stop_monitoring()` for a background
  thread; an optional `notify(title, message)` callback is told of
  each warning.
- `pumpsim.bolus`: `calculate_suggested_bolus(profile, bg, carbs, iob)`,
  `BolusForm`, `BgSource` and `InvalidInputError`.
- `pumpsim.views`: `history_rows`, `alert_rows`, `bolus_history_rows`,
  `format_table` and the scrolling `CgmGraph` (with `set_range` for the
  1 h / 3 h / 6 h windows of 12, 36 and 72 seconds).
- `pumpsim.profile_editor`: `ProfileEditor`, which takes `ask` and
  `notify` callbacks for its prompts.
- `pumpsim.app`: `PumpApp` (`status_text`, `tick`, `handle`, `run`) and
  the `main` entry point.

## What it does not do

- There is no graphical window or drawn chart: the pump is driven from
  the terminal, and the CGM graph is a list of points.
- Nothing is saved. Profiles and history live in memory and are lost
  when the program exits.
- The bolus total is never reset, so the 30 U limit covers the whole
  run rather than a calendar day.
- Basal delivery is not modelled beyond the logged adjustments, and
  boluses do not draw down the reservoir.