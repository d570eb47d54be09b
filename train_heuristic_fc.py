"""Train the fully connected distance estimator used by NeuralOracle.

Training pairs are generated on the fly: a random scramble from the solved
state, labelled with its length after merging same-face runs. That length is
an upper bound on the true distance, which is good enough for an oracle that
is only consulted now and then and whose estimates are range-checked.
"""
from datetime import datetime
from pathlib import Path
from typing import Dict

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim
from argdantic import ArgParser
from pydantic import BaseModel
from torch.utils.data import DataLoader, Dataset
from tqdm import tqdm
import wandb

from cube_astar import scramble, simplify_moves
from cube_astar.neural import INPUT_SIZE, FCHeuristicNet, state_to_onehot

cli = ArgParser()


class TrainConfig(BaseModel):
    # Data
    train_size: int = 50000
    val_size: int = 2000
    test_size: int = 2000
    min_scramble_moves: int = 1
    max_scramble_moves: int = 20

    # Model architecture
    hidden_size: int = 512
    num_layers: int = 4

    # Training
    batch_size: int = 256
    epochs: int = 20
    learning_rate: float = 1e-3
    weight_decay: float = 1e-4

    # Logging and checkpoints
    project_name: str = "3x3-cube-heuristic-fc"
    wandb_mode: str = "disabled"  # online | offline | disabled
    checkpoint_dir: str = "checkpoints/3x3-heuristic-fc"
    checkpoint_every: int = 5  # epochs

    device: str = "cuda" if torch.cuda.is_available() else "cpu"
    seed: int = 42


class ScrambleDataset(Dataset):
    def __init__(self, size: int, min_moves: int, max_moves: int, seed: int):
        rng = np.random.default_rng(seed)

        inputs = []
        labels = []
        for _ in tqdm(range(size), desc=f"Generating (seed={seed})"):
            depth = int(rng.integers(min_moves, max_moves + 1))
            state, moves = scramble(depth, rng)
            inputs.append(state_to_onehot(state))
            labels.append(len(simplify_moves(moves)))

        self.inputs = np.stack(inputs)
        self.labels = np.array(labels, dtype=np.float32)

    def __len__(self):
        return len(self.inputs)

    def __getitem__(self, idx):
        return torch.from_numpy(self.inputs[idx]), torch.tensor(self.labels[idx], dtype=torch.float32)


def save_checkpoint(model, optimizer, epoch, train_loss, val_loss, config: TrainConfig, path: Path):
    checkpoint = {
        'epoch': epoch,
        'model_state_dict': model.state_dict(),
        'optimizer_state_dict': optimizer.state_dict(),
        'train_loss': train_loss,
        'val_loss': val_loss,
        'arch': {'hidden_size': config.hidden_size, 'num_layers': config.num_layers},
    }
    torch.save(checkpoint, path)
    print(f"Checkpoint saved: {path}")


def train_epoch(model, loader, optimizer, criterion, device, epoch, config: TrainConfig):
    model.train()
    total_loss = 0.0
    total_mae = 0.0
    num_batches = 0

    pbar = tqdm(loader, desc=f"Epoch {epoch+1}/{config.epochs} [Train]")
    for inputs, labels in pbar:
        inputs = inputs.to(device)
        labels = labels.to(device)

        optimizer.zero_grad()
        outputs = model(inputs)
        loss = criterion(outputs, labels)
        loss.backward()
        optimizer.step()

        with torch.no_grad():
            mae = torch.abs(outputs - labels).mean()

        total_loss += loss.item()
        total_mae += mae.item()
        num_batches += 1
        pbar.set_postfix(loss=f"{loss.item():.3f}")

    return total_loss / num_batches, total_mae / num_batches


@torch.no_grad()
def evaluate(model, loader, criterion, device) -> Dict[str, float]:
    model.eval()
    total_loss = 0.0
    total_mae = 0.0
    total_correct = 0
    num_batches = 0
    num_samples = 0

    for inputs, labels in tqdm(loader, desc="Validating"):
        inputs = inputs.to(device)
        labels = labels.to(device)

        outputs = model(inputs)
        total_loss += criterion(outputs, labels).item()
        total_mae += torch.abs(outputs - labels).mean().item()
        total_correct += (torch.round(outputs) == labels).sum().item()
        num_batches += 1
        num_samples += labels.size(0)

    return {
        'loss': total_loss / num_batches,
        'mae': total_mae / num_batches,
        'accuracy': total_correct / num_samples,
    }


def train_model(config: TrainConfig) -> Path:
    torch.manual_seed(config.seed)
    np.random.seed(config.seed)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(config.checkpoint_dir) / timestamp
    run_dir.mkdir(parents=True, exist_ok=True)

    run = wandb.init(project=config.project_name, mode=config.wandb_mode, config=config.model_dump())
    print(f"Device: {config.device}")
    print(f"Checkpoints will be saved to: {run_dir}")

    train_set = ScrambleDataset(config.train_size, config.min_scramble_moves, config.max_scramble_moves, config.seed)
    val_set = ScrambleDataset(config.val_size, config.min_scramble_moves, config.max_scramble_moves, config.seed + 1)
    test_set = ScrambleDataset(config.test_size, config.min_scramble_moves, config.max_scramble_moves, config.seed + 2)

    train_loader = DataLoader(train_set, batch_size=config.batch_size, shuffle=True)
    val_loader = DataLoader(val_set, batch_size=config.batch_size, shuffle=False)
    test_loader = DataLoader(test_set, batch_size=config.batch_size, shuffle=False)

    model = FCHeuristicNet(INPUT_SIZE, config.hidden_size, config.num_layers).to(config.device)
    print(f"Total parameters: {sum(p.numel() for p in model.parameters()):,}")

    optimizer = optim.AdamW(model.parameters(), lr=config.learning_rate, weight_decay=config.weight_decay)
    criterion = nn.MSELoss()
    scheduler = optim.lr_scheduler.CosineAnnealingLR(
        optimizer, T_max=config.epochs, eta_min=config.learning_rate * 0.01
    )

    best_val_loss = float('inf')
    train_loss = val_loss = float('nan')

    for epoch in range(config.epochs):
        train_loss, train_mae = train_epoch(model, train_loader, optimizer, criterion, config.device, epoch, config)
        val_metrics = evaluate(model, val_loader, criterion, config.device)
        val_loss = val_metrics['loss']

        scheduler.step()

        run.log({
            'epoch': epoch + 1,
            'train/loss': train_loss,
            'train/mae': train_mae,
            'val/loss': val_loss,
            'val/mae': val_metrics['mae'],
            'val/accuracy': val_metrics['accuracy'],
            'learning_rate': scheduler.get_last_lr()[0],
        })
        print(f"  train loss {train_loss:.4f} | val loss {val_loss:.4f} | val mae {val_metrics['mae']:.3f}")

        if val_loss < best_val_loss:
            best_val_loss = val_loss
            save_checkpoint(model, optimizer, epoch, train_loss, val_loss, config, run_dir / "best_model.pt")
            print(f"  New best model saved! Val Loss: {best_val_loss:.4f}")

        if (epoch + 1) % config.checkpoint_every == 0:
            save_checkpoint(model, optimizer, epoch, train_loss, val_loss, config, run_dir / f"checkpoint_epoch_{epoch + 1}.pt")

    final_path = run_dir / "final_model.pt"
    save_checkpoint(model, optimizer, config.epochs - 1, train_loss, val_loss, config, final_path)

    test_metrics = evaluate(model, test_loader, criterion, config.device)
    run.log({f'test/{k}': v for k, v in test_metrics.items()})
    run.finish()

    print(f"Best validation loss: {best_val_loss:.4f}")
    print(f"Test MAE: {test_metrics['mae']:.3f}, accuracy: {test_metrics['accuracy']:.3f}")
    return final_path


@cli.command(singleton=True)
def train(config: TrainConfig):
    train_model(config)


if __name__ == "__main__":
    cli()
